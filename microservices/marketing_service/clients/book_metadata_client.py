"""
Book Metadata Client

Client for the book metadata provider, which owns book projects
(title, author, retail identifiers, marketing copy).
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from core.config import ServiceConfig, get_settings
from ..models import BookContext
from ..protocols import BookMetadataError

logger = logging.getLogger(__name__)


class BookMetadataClient:
    """Client for the book metadata provider"""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_settings().services
        self.base_url = config.book_metadata_url.rstrip("/")
        self.timeout = config.http_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def get_book_context(self, project_id: str) -> BookContext:
        """
        Fetch the metadata channel launchers need for a book project.

        Raises:
            BookMetadataError: project missing or provider unreachable
        """
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/api/v1/books/projects/{project_id}")
                response.raise_for_status()
                payload = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Error fetching book metadata for {project_id}: {e.response.status_code}")
            raise BookMetadataError(project_id, f"HTTP {e.response.status_code}") from e

        except httpx.HTTPError as e:
            logger.error(f"Error fetching book metadata for {project_id}: {e}")
            raise BookMetadataError(project_id, str(e)) from e

        project = payload.get("project", payload)
        return BookContext(
            project_id=project.get("project_id", project_id),
            title=project.get("title") or "",
            author_name=project.get("author_name"),
            genre=project.get("genre"),
            asin=project.get("asin"),
            amazon_url=project.get("amazon_url"),
            cover_url=project.get("cover_url"),
            description=project.get("description"),
            keywords=_parse_keywords(project.get("keywords")),
        )

    async def health_check(self) -> bool:
        """Check if the provider is healthy"""
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/health")
                return response.status_code == 200
        except Exception:
            return False


def _parse_keywords(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return [k.strip() for k in raw.split(",") if k.strip()]
    return [str(k) for k in raw]


__all__ = ["BookMetadataClient"]
