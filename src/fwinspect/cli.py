"""
fwinspect command line entry point.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import click

from fwinspect import __version__
from fwinspect.firewall.cli import firewall
from fwinspect.logging_config import configure_logging


@click.group()
@click.version_option(__version__, prog_name="fwinspect")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
def main(debug: bool, log_file: str | None):
    """fwinspect - firewall rule compliance checks."""
    configure_logging(debug=debug, log_file=log_file)


main.add_command(firewall)


if __name__ == "__main__":
    main()
