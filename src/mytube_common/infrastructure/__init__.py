from mytube_common.infrastructure.interfaces import ArtifactStore

__all__ = [
    "ArtifactStore",
]
