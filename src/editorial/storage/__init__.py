"""
Storage Layer - a single JSON document read and written as a whole.

All services receive a DocumentStore handle explicitly; there is no
module-level store.
"""

from editorial.storage.document import DocumentStore

__all__ = [
    "DocumentStore",
]
