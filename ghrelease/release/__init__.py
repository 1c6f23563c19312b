"""GitHub release creation and asset upload."""

from .errors import PackagingError, ReleaseError
from .model import AssetJob, PublishReport, ReleaseSpec, UploadEndpoint
from .orchestrator import publish, run

__all__ = [
    "AssetJob",
    "PackagingError",
    "PublishReport",
    "ReleaseError",
    "ReleaseSpec",
    "UploadEndpoint",
    "publish",
    "run",
]
