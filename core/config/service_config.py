#!/usr/bin/env python3
"""Service configuration for peer platform services

External service dependencies the marketing service calls: the book
metadata provider (project/book catalogue) and the author CRM.
"""
import os
from dataclasses import dataclass
from typing import Optional

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class ServiceConfig:
    """Peer service endpoints"""

    # ===========================================
    # Book Metadata Provider
    # ===========================================
    book_metadata_url: str = "http://localhost:8250"

    # ===========================================
    # CRM
    # ===========================================
    crm_url: str = "http://localhost:9200"
    crm_api_key: Optional[str] = None

    # ===========================================
    # HTTP client defaults
    # ===========================================
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        return cls(
            book_metadata_url=os.getenv("BOOK_METADATA_URL") or os.getenv("PUBLISHING_SERVICE_URL", "http://localhost:8250"),
            crm_url=os.getenv("NEXUS_CRM_URL") or os.getenv("CRM_URL", "http://localhost:9200"),
            crm_api_key=os.getenv("NEXUS_CRM_API_KEY") or os.getenv("CRM_API_KEY"),
            http_timeout=_float(os.getenv("HTTP_TIMEOUT", "10"), 10.0),
        )
