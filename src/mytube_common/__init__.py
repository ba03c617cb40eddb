from mytube_common.client_identities import ClientIdentity, spoofed_headers
from mytube_common.config import StorageConfig
from mytube_common.exceptions import ObjectNotFound, StorageUnavailable
from mytube_common.logging import setup_logging
from mytube_common.models import ObjectStat, StoredObject

__all__ = [
    "setup_logging",
    "ObjectNotFound",
    "StorageUnavailable",
    "StorageConfig",
    "ObjectStat",
    "StoredObject",
    "ClientIdentity",
    "spoofed_headers",
]
