"""
Marketing Service Factory

Factory for creating marketing service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.config import MarketingConfig, get_settings
from core.nats_client import NATSEventBus

from .campaign_orchestrator import CampaignOrchestrator
from .channels import ChannelRegistry, build_channel_registry
from .clients.book_metadata_client import BookMetadataClient
from .clients.crm_client import CRMClient
from .events.models import MarketingStreamConfig
from .events.publishers import MarketingEventPublisher
from .marketing_repository import MarketingRepository
from .performance_tracker import PerformanceTracker

logger = logging.getLogger(__name__)


class MarketingServiceFactory:
    """Factory for creating marketing service components"""

    def __init__(self, config: Optional[MarketingConfig] = None):
        self.config = config or get_settings()
        self._repository: Optional[MarketingRepository] = None
        self._nats_client: Optional[NATSEventBus] = None
        self._event_publisher: Optional[MarketingEventPublisher] = None
        self._book_metadata_client: Optional[BookMetadataClient] = None
        self._crm_client: Optional[CRMClient] = None
        self._launchers: Optional[ChannelRegistry] = None
        self._orchestrator: Optional[CampaignOrchestrator] = None
        self._tracker: Optional[PerformanceTracker] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Marketing Service components...")

        # Initialize repository
        self._repository = MarketingRepository(self.config.infrastructure)
        await self._repository.initialize()

        # Initialize NATS client
        if self.config.infrastructure.nats_enabled:
            try:
                self._nats_client = NATSEventBus(
                    service_name=self.config.service_name,
                    config=self.config.infrastructure,
                )
                await self._nats_client.connect()
                await self._nats_client.create_stream(
                    MarketingStreamConfig.STREAM_NAME,
                    MarketingStreamConfig.SUBJECTS,
                    max_msgs=MarketingStreamConfig.MAX_MESSAGES,
                )
                logger.info("NATS client connected")
            except Exception as e:
                logger.warning(f"NATS client initialization failed: {e}")
                self._nats_client = None
        self._event_publisher = MarketingEventPublisher(self._nats_client)

        # Initialize peer service clients and channel launchers
        self._book_metadata_client = BookMetadataClient(self.config.services)
        self._crm_client = CRMClient(self.config.services)
        self._launchers = build_channel_registry(
            self.config.channels,
            timeout=self.config.services.http_timeout,
        )

        # Initialize core components
        self._orchestrator = CampaignOrchestrator(
            repository=self._repository,
            launchers=self._launchers,
            book_metadata_client=self._book_metadata_client,
            crm_client=self._crm_client,
            event_publisher=self._event_publisher,
        )
        self._tracker = PerformanceTracker(
            repository=self._repository,
            event_publisher=self._event_publisher,
        )

        logger.info("Marketing Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Marketing Service components...")

        if self._nats_client:
            await self._nats_client.close()

        if self._repository:
            await self._repository.close()

        logger.info("Marketing Service components closed")

    @property
    def repository(self) -> MarketingRepository:
        """Get marketing repository"""
        if not self._repository:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._repository

    @property
    def orchestrator(self) -> CampaignOrchestrator:
        """Get campaign orchestrator"""
        if not self._orchestrator:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._orchestrator

    @property
    def tracker(self) -> PerformanceTracker:
        """Get performance tracker"""
        if not self._tracker:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._tracker

    @property
    def nats_client(self) -> Optional[NATSEventBus]:
        """Get NATS client"""
        return self._nats_client

    @property
    def book_metadata_client(self) -> Optional[BookMetadataClient]:
        """Get book metadata provider client"""
        return self._book_metadata_client


__all__ = [
    "MarketingServiceFactory",
]
