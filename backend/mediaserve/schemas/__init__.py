from mediaserve.schemas.asset import (
    AssetMetadata,
    AssetRecord,
    ImageMetadata,
    OtherMetadata,
    ResizeRequest,
    TargetDimensions,
    TranscodeOutput,
)
from mediaserve.schemas.info import ServiceInfo

__all__ = [
    "AssetMetadata",
    "AssetRecord",
    "ImageMetadata",
    "OtherMetadata",
    "ResizeRequest",
    "TargetDimensions",
    "TranscodeOutput",
    "ServiceInfo",
]
