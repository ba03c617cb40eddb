from mytube_common.infrastructure.interfaces.storage import ArtifactStore

__all__ = [
    "ArtifactStore",
]
