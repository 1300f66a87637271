#!/usr/bin/env python3
"""
Core Module for the Book Marketing Platform

Shared infrastructure components used by the marketing microservices.

COMPONENTS:
    - config/: Dataclass configuration loaded from environment (.env per ENV)
    - logger.py: Service logger setup driven by LoggingConfig
    - nats_client.py: NATS JetStream event bus for event-driven architecture

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger
    from core.nats_client import NATSEventBus
"""

__all__ = [
    "config",
    "logger",
    "nats_client",
]

__version__ = "1.0.0"
