"""
CRM Client

Pushes launched campaigns to the author CRM so marketing activity shows up
next to reader and contact data.
"""

import logging
from typing import Dict, Optional

import httpx

from core.config import ServiceConfig, get_settings
from ..models import Campaign

logger = logging.getLogger(__name__)


class CRMClient:
    """Client for the CRM"""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_settings().services
        self.base_url = config.crm_url.rstrip("/")
        self.api_key = config.crm_api_key
        self.timeout = config.http_timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def sync_campaign(self, campaign: Campaign) -> bool:
        """
        Push a campaign to the CRM.

        Returns:
            True once the CRM accepted the campaign

        Raises:
            httpx.HTTPError: the CRM rejected the request or was unreachable
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/api/campaigns",
                    json=campaign.model_dump(mode="json"),
                    headers=self._headers(),
                )
                response.raise_for_status()
                logger.info(f"Synced campaign {campaign.campaign_id} to CRM")
                return True

        except httpx.HTTPStatusError as e:
            logger.error(f"Error syncing campaign {campaign.campaign_id} to CRM: {e.response.text}")
            raise

        except Exception as e:
            logger.error(f"Error syncing campaign {campaign.campaign_id} to CRM: {e}")
            raise


__all__ = ["CRMClient"]
