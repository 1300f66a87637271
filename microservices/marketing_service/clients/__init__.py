"""
Marketing Service Clients

Clients for calling peer services.
"""

from .book_metadata_client import BookMetadataClient
from .crm_client import CRMClient

__all__ = [
    "BookMetadataClient",
    "CRMClient",
]
