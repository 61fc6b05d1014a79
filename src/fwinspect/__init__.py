"""
fwinspect - Cloud Firewall Rule Compliance Checks

Loads Google Compute Engine firewall rules and answers compliance
questions about them: which protocol/port pairs a rule allows, which
tags it applies to, and which IP ranges it admits.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
