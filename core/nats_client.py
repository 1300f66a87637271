"""
NATS JetStream Client for Python Microservices
Provides event-driven communication between platform services

This module wraps the nats-py client: one connection per process, JetStream
streams created on demand, payloads serialized as JSON.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import nats
from nats.aio.client import Client as NATS
from nats.js import JetStreamContext

from core.config import InfraConfig, get_settings


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles Decimal, datetime and Enum types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


logger = logging.getLogger(__name__)


class NATSEventBus:
    """
    NATS JetStream event bus.

    Streams are keyed by the first segment of the subject
    (``marketing.campaign.launched`` -> ``marketing-stream``) and created
    idempotently before the first publish on that prefix.
    """

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
    ):
        """
        Initialize NATS Event Bus.

        Args:
            service_name: Name of the service (used as connection name)
            config: Optional InfraConfig; defaults to global settings
        """
        self.service_name = service_name
        self.config = config or get_settings().infrastructure
        self.url = self.config.nats_server_url

        self._nc: Optional[NATS] = None
        self._js: Optional[JetStreamContext] = None
        self._streams: Dict[str, bool] = {}

        logger.info(f"NATS EventBus initialized: {self.url}")

    async def connect(self):
        """Connect to NATS and open a JetStream context"""
        try:
            self._nc = await nats.connect(
                servers=[self.url],
                name=self.service_name,
                max_reconnect_attempts=5,
            )
            self._js = self._nc.jetstream()
            logger.info(f"Connected to NATS as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS at {self.url}: {e}")
            raise

    async def publish(self, subject: str, data: Dict[str, Any]) -> bool:
        """Publish a raw JSON payload on a subject"""
        if not self.is_connected:
            logger.error("Not connected to NATS")
            return False

        try:
            stream_name = self._get_stream_name_for_subject(subject)
            await self.create_stream(stream_name, [f"{subject.split('.')[0]}.>"])

            payload = json.dumps(data, cls=DecimalEncoder).encode()
            ack = await self._js.publish(subject, payload)
            logger.info(f"Published {subject} to stream {ack.stream}, seq={ack.seq}")
            return True

        except Exception as e:
            logger.error(f"Error publishing to {subject}: {e}")
            return False

    def _get_stream_name_for_subject(self, subject: str) -> str:
        prefix = subject.split('.')[0]
        return f"{prefix}-stream"

    async def create_stream(self, name: str, subjects: List[str], max_msgs: int = 100000) -> bool:
        """Create a JetStream stream once per process"""
        if not self.is_connected:
            return False
        if self._streams.get(name):
            return True

        try:
            await self._js.add_stream(name=name, subjects=subjects, max_msgs=max_msgs)
        except Exception as e:
            # add_stream fails when the stream already exists with another config
            logger.debug(f"Stream creation note for {name}: {e}")
        self._streams[name] = True
        return True

    async def close(self):
        """Drain and close the NATS connection"""
        if self._nc and not self._nc.is_closed:
            await self._nc.drain()
        self._nc = None
        self._js = None
        self._streams.clear()
        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        """Check if connected to NATS"""
        return self._nc is not None and self._nc.is_connected and self._js is not None

