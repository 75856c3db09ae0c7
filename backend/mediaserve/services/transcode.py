import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from mediaserve.core.codecs import OutputCodec, PngCodec, WebpCodec
from mediaserve.core.errors import DecodeError, EncodeError
from mediaserve.schemas import TranscodeOutput

logger = logging.getLogger(__name__)

COVER_FIT = "cover"


def _decode(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
        MemoryError,
    ) as exc:
        raise DecodeError(str(exc)) from exc
    return image


def _contain_size(image: Image.Image, width: int, height: int) -> tuple[int, int]:
    # Aspect-preserving contain, so 800x600 into a 400x400 box gives 400x300.
    src_w, src_h = image.size
    scale = min(width / src_w, height / src_h)
    return max(1, int(src_w * scale)), max(1, int(src_h * scale))


def _check_output_size(width: int, height: int) -> None:
    # Same ceiling Pillow applies to decoded images.
    limit = Image.MAX_IMAGE_PIXELS
    if limit is not None and width * height > limit:
        raise EncodeError(f"Target {width}x{height} exceeds {limit} pixels")


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info


def _resize(image: Image.Image, width: int, height: int, fit: str | None) -> Image.Image:
    try:
        # Both output codecs take RGB(A); palette images also resample poorly.
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA" if _has_alpha(image) else "RGB")
        if fit == COVER_FIT:
            return ImageOps.fit(image, (width, height), method=Image.Resampling.LANCZOS)
        return image.resize(_contain_size(image, width, height), Image.Resampling.BILINEAR)
    except (OSError, ValueError, OverflowError, MemoryError) as exc:
        raise EncodeError(str(exc)) from exc


def _encode(image: Image.Image, codec: OutputCodec) -> bytes:
    buffer = io.BytesIO()
    try:
        if isinstance(codec, WebpCodec):
            if codec.quality is not None:
                image.save(buffer, format="WEBP", quality=int(codec.quality))
            else:
                image.save(buffer, format="WEBP", lossless=True)
        elif isinstance(codec, PngCodec):
            image.save(buffer, format="PNG")
        else:  # pragma: no cover - closed union
            raise EncodeError(f"Unsupported codec {codec!r}")
    except (OSError, ValueError, KeyError, OverflowError, MemoryError) as exc:
        raise EncodeError(str(exc)) from exc
    return buffer.getvalue()


def transcode(
    data: bytes,
    width: int,
    height: int,
    fit: str | None,
    codec: OutputCodec,
) -> TranscodeOutput:
    """Decode ``data``, resize into ``width`` x ``height`` and re-encode with ``codec``.

    ``fit="cover"`` fills the box exactly, cropping the overflow; any other
    value scales the image to fit inside the box keeping its aspect ratio.
    The input format is sniffed from the bytes.
    """
    _check_output_size(width, height)
    image = _decode(data)
    logger.debug(
        "Transcoding %s %sx%s -> %sx%s (fit=%s, codec=%s)",
        image.format,
        image.width,
        image.height,
        width,
        height,
        fit or "default",
        codec.format,
    )
    resized = _resize(image, width, height, fit)
    return TranscodeOutput(data=_encode(resized, codec), content_type=codec.content_type)
