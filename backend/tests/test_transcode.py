import io

import pytest
from PIL import Image

from mediaserve.core.codecs import PngCodec, WebpCodec
from mediaserve.core.errors import DecodeError, EncodeError
from mediaserve.services.transcode import transcode

from conftest import make_image


def open_output(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def test_default_fit_preserves_aspect_within_box():
    output = transcode(make_image(800, 600), 400, 400, None, PngCodec())

    image = open_output(output.data)
    assert image.format == "PNG"
    assert image.size == (400, 300)
    assert output.content_type == "image/png"


def test_unknown_fit_behaves_like_default():
    output = transcode(make_image(800, 600), 400, 400, "stretch", PngCodec())
    assert open_output(output.data).size == (400, 300)


def test_cover_fills_target_exactly():
    output = transcode(make_image(800, 600), 400, 400, "cover", PngCodec())
    assert open_output(output.data).size == (400, 400)


def test_default_fit_may_upscale_for_dpr():
    output = transcode(make_image(100, 50), 400, 400, "default", PngCodec())
    assert open_output(output.data).size == (400, 200)


def test_input_format_is_sniffed_not_declared():
    output = transcode(make_image(64, 64, fmt="GIF", mode="P"), 32, 32, None, PngCodec())
    assert open_output(output.data).size == (32, 32)


def test_webp_lossless_without_quality():
    output = transcode(make_image(120, 80, fmt="PNG"), 60, 60, None, WebpCodec())

    image = open_output(output.data)
    assert image.format == "WEBP"
    assert image.size == (60, 40)
    assert output.content_type == "image/webp"


def test_webp_lossy_with_quality():
    lossy = transcode(make_image(120, 80, fmt="PNG"), 60, 60, "cover", WebpCodec(quality=40))

    image = open_output(lossy.data)
    assert image.format == "WEBP"
    assert image.size == (60, 60)


def test_alpha_is_kept_for_png_output():
    output = transcode(make_image(40, 40, fmt="PNG", mode="RGBA"), 20, 20, None, PngCodec())
    assert open_output(output.data).mode == "RGBA"


@pytest.mark.parametrize("data", [b"", b"not an image at all", make_image(50, 50)[:40]])
def test_corrupt_input_raises_decode_error(data):
    with pytest.raises(DecodeError):
        transcode(data, 10, 10, None, PngCodec())


def test_target_beyond_pixel_ceiling_raises_encode_error():
    side = int(Image.MAX_IMAGE_PIXELS ** 0.5) + 1
    with pytest.raises(EncodeError):
        transcode(make_image(10, 10), side, side, None, PngCodec())


def test_resampler_memory_error_becomes_encode_error(monkeypatch):
    def exhausted(self, *args, **kwargs):
        raise MemoryError()

    monkeypatch.setattr(Image.Image, "resize", exhausted)
    with pytest.raises(EncodeError):
        transcode(make_image(40, 40), 20, 20, None, PngCodec())
