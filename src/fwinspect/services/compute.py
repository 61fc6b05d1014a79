"""
Compute Engine API Client

Fetches a single firewall rule by project and name from the
Compute Engine REST API.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from fwinspect.config import get_config
from fwinspect.firewall.models import FirewallRule
from fwinspect.logging_config import track_error

logger = logging.getLogger(__name__)


@dataclass
class FirewallLookupResult:
    """Result of fetching one firewall rule."""
    project: str
    name: str
    firewall: FirewallRule | None = None
    status_code: int | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.firewall is not None


class ComputeClient:
    """Client for the Compute Engine firewalls API."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = get_config()
        self.access_token = access_token or config.gcp_access_token
        self.base_url = (base_url or config.compute_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        """Get authorization headers."""
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def firewall_url(self, project: str, name: str) -> str:
        return (
            f"{self.base_url}/projects/{quote(project, safe='')}"
            f"/global/firewalls/{quote(name, safe='')}"
        )

    async def get_firewall_async(self, project: str, name: str) -> FirewallLookupResult:
        """Fetch a firewall rule asynchronously.

        A missing rule is not an error: the result simply has no firewall.
        Any other failure is recorded in ``error``.
        """
        result = FirewallLookupResult(project=project, name=name)
        url = self.firewall_url(project, name)

        client = await self._get_client()
        try:
            resp = await client.get(url, headers=self._get_headers())
            result.status_code = resp.status_code

            if resp.status_code == 404:
                logger.info("Firewall %s not found in project %s", name, project)
                return result

            resp.raise_for_status()
            result.firewall = FirewallRule.from_api(resp.json())
            logger.debug("Loaded firewall %s from project %s", name, project)

        except httpx.HTTPStatusError as e:
            result.error = f"HTTP {e.response.status_code}: {e.response.text}"
            track_error(
                "firewall_fetch_http",
                result.error,
                context={"project": project, "name": name},
            )
        except (httpx.HTTPError, ValueError) as e:
            result.error = str(e) or type(e).__name__
            track_error(
                "firewall_fetch_failed",
                result.error,
                exception=e,
                context={"project": project, "name": name},
            )

        return result

    def get_firewall(self, project: str, name: str) -> FirewallLookupResult:
        """Synchronous fetch."""
        async def _run() -> FirewallLookupResult:
            try:
                return await self.get_firewall_async(project, name)
            finally:
                await self.close()

        return asyncio.run(_run())
