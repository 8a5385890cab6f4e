"""
Adapters - Implementations of ports.

Token Storage:
- FileTokenStore: JSON file (default)
- RedisTokenStore: Redis keys
- MemoryTokenStore: In-memory (testing)

Direct document store (static hosting):
- FirestoreStatsBackend, FirestoreUserBackend,
  FirestorePaymentBackend, FirestoreLicenseBackend

REST API:
- RestStatsBackend, RestUserBackend,
  RestPaymentBackend, RestLicenseBackend
"""

# Token Storage
from dashboard_client.adapters.file_token_store import FileTokenStore
from dashboard_client.adapters.redis_token_store import RedisTokenStore
from dashboard_client.adapters.memory_token_store import MemoryTokenStore

# Direct document store
from dashboard_client.adapters.firestore_backend import (
    FirestoreLicenseBackend,
    FirestorePaymentBackend,
    FirestoreStatsBackend,
    FirestoreUserBackend,
)

# REST API
from dashboard_client.adapters.rest_backend import (
    RestLicenseBackend,
    RestPaymentBackend,
    RestStatsBackend,
    RestUserBackend,
)

__all__ = [
    # Token Storage
    "FileTokenStore",
    "RedisTokenStore",
    "MemoryTokenStore",
    # Direct document store
    "FirestoreStatsBackend",
    "FirestoreUserBackend",
    "FirestorePaymentBackend",
    "FirestoreLicenseBackend",
    # REST API
    "RestStatsBackend",
    "RestUserBackend",
    "RestPaymentBackend",
    "RestLicenseBackend",
]
