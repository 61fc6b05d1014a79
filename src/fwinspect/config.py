"""
Configuration management for fwinspect.

Loads the Compute Engine credentials and endpoint from environment
variables or a .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass

from dotenv import load_dotenv

# Check common locations for .env
env_locations = [
    Path.home() / ".fwinspect" / ".env",
    Path.home() / ".config" / "fwinspect" / ".env",
    Path.cwd() / ".env",
]
for env_path in env_locations:
    if env_path.exists():
        load_dotenv(env_path)
        break


COMPUTE_API_URL = "https://compute.googleapis.com/compute/v1"


@dataclass
class APIConfig:
    """API configuration with credentials and endpoints."""

    # Google Cloud
    gcp_access_token: str = ""
    gcp_project: str = ""

    # Compute Engine REST endpoint (override for emulators or proxies)
    compute_api_url: str = COMPUTE_API_URL

    # Seconds
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Load configuration from environment variables."""
        return cls(
            gcp_access_token=os.getenv("GOOGLE_OAUTH_ACCESS_TOKEN", ""),
            gcp_project=os.getenv("GOOGLE_CLOUD_PROJECT", os.getenv("CLOUDSDK_CORE_PROJECT", "")),
            compute_api_url=os.getenv("FWINSPECT_COMPUTE_API_URL", COMPUTE_API_URL),
            request_timeout=float(os.getenv("FWINSPECT_REQUEST_TIMEOUT", "10.0")),
        )


# Global config instance
_config: APIConfig | None = None


def get_config() -> APIConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = APIConfig.from_env()
    return _config


def set_config(config: APIConfig | None) -> None:
    """Set the global configuration instance (None reloads from the environment)."""
    global _config
    _config = config
