from fastapi import status


class MediaServeError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class AssetNotFound(MediaServeError):
    """Unknown asset, or one whose record is flagged as deleted."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class UnknownTag(MediaServeError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Unknown tag"


class ContentTypeNotAllowed(MediaServeError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Content type not allowed"


class StorageUnavailable(MediaServeError):
    """Raised once every storage tier has failed for an asset."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Storage unavailable"


class StorageError(Exception):
    """A single storage tier failed to produce the requested object."""

    def __init__(self, tier: str, asset_id: str, reason: str) -> None:
        super().__init__(f"{tier} tier failed for {asset_id}: {reason}")
        self.tier = tier
        self.asset_id = asset_id
        self.reason = reason


class TranscodeError(Exception):
    """Base for image transcode failures; never surfaced to clients."""


class DecodeError(TranscodeError):
    """Input bytes are not a recognised or intact image."""


class EncodeError(TranscodeError):
    """The output codec failed to encode the resized raster."""
