from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class PngCodec(BaseModel):
    """Lossless PNG output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: Literal["png"] = "png"

    @property
    def content_type(self) -> str:
        return "image/png"


class WebpCodec(BaseModel):
    """WebP output; lossy at ``quality`` when set, lossless otherwise."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: Literal["webp"] = "webp"
    quality: float | None = Field(default=None, ge=0, le=100)

    @property
    def content_type(self) -> str:
        return "image/webp"


OutputCodec = Annotated[PngCodec | WebpCodec, Field(discriminator="format")]
