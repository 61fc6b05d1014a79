"""
External API Services Module

Provides clients for external APIs:
- Compute Engine - firewall rule resources
"""

from fwinspect.services.compute import ComputeClient, FirewallLookupResult

__all__ = [
    "ComputeClient",
    "FirewallLookupResult",
]
