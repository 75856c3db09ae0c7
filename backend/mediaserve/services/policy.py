import logging
from collections.abc import Collection
from typing import Literal

from mediaserve.core.errors import AssetNotFound, ContentTypeNotAllowed
from mediaserve.schemas import AssetRecord

logger = logging.getLogger(__name__)

Disposition = Literal["inline", "attachment"]

# Must match the media types the upload side accepts as images / videos.
INLINE_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "video/mp4",
        "video/webm",
        "video/webp",
        "audio/quicktime",
        "audio/mpeg",
    }
)


def admit(record: AssetRecord, denylist: Collection[str]) -> None:
    """Raise if ``record`` may not be served."""
    if record.deleted:
        raise AssetNotFound()
    if record.content_type in denylist:
        logger.info("Refusing to serve denied content type %s", record.content_type)
        raise ContentTypeNotAllowed()


def disposition_for(content_type: str) -> Disposition:
    if content_type in INLINE_CONTENT_TYPES:
        return "inline"
    return "attachment"
