from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class ImageMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    width: PositiveInt
    height: PositiveInt


class OtherMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["other"] = "other"


AssetMetadata = Annotated[ImageMetadata | OtherMetadata, Field(discriminator="type")]


class AssetRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    content_type: str
    deleted: bool = False
    metadata: AssetMetadata = Field(default_factory=OtherMetadata)


class ResizeRequest(BaseModel):
    size: PositiveInt | None = None
    width: PositiveInt | None = None
    height: PositiveInt | None = None
    max_side: PositiveInt | None = None
    fit: str | None = None
    dpr: float | None = Field(default=None, gt=0, allow_inf_nan=False)


class TargetDimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: PositiveInt
    height: PositiveInt


class TranscodeOutput(BaseModel):
    data: bytes
    content_type: str
