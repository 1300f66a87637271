"""
Channel Launcher Base

Shared HTTP plumbing for platform launchers. Remote failures surface as
ChannelLaunchError so the orchestrator can isolate them per channel.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..models import ChannelKind
from ..protocols import ChannelLaunchError

logger = logging.getLogger(__name__)


class PlatformLauncher:
    """Base for launchers talking to a JSON HTTP API"""

    channel: ChannelKind

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=self._headers(),
                    **kwargs,
                )
                response.raise_for_status()
                return response.json() if response.content else {}

        except httpx.HTTPStatusError as e:
            logger.error(f"{self.channel.value} {method} {path} failed: {e.response.status_code} {e.response.text}")
            raise ChannelLaunchError(self.channel, f"HTTP {e.response.status_code}") from e

        except httpx.HTTPError as e:
            logger.error(f"{self.channel.value} {method} {path} failed: {e}")
            raise ChannelLaunchError(self.channel, str(e) or type(e).__name__) from e


__all__ = ["PlatformLauncher"]
