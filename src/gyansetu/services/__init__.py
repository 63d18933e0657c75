# src/gyansetu/services/__init__.py
"""Business logic services for the GyanSetu application."""

from .moderation import ModerationService
from .storage import BlobStore, get_blob_store

__all__ = [
    "BlobStore",
    "ModerationService",
    "get_blob_store",
]
