"""Basic tests for textart."""

import io
import os

import numpy as np
import pytest
from PIL import Image


def test_measure_positive():
    from textart import FontConfig, measure
    width, height = measure("Hi", FontConfig())
    assert width > 0
    assert height > 0


@pytest.mark.parametrize("text", ["A", "Hello", "hello world", "0123456789", "~!@#"])
def test_measure_positive_ascii(text):
    from textart import measure
    width, height = measure(text)
    assert width > 0
    assert height > 0


def test_measure_empty_text_has_zero_width():
    from textart import measure
    width, height = measure("")
    assert width == 0
    assert height > 0


def test_longer_text_is_wider():
    from textart import measure
    assert measure("Hi there")[0] > measure("Hi")[0]


def test_rasterize_matches_measure():
    from textart import measure, rasterize
    img = rasterize("Hi")
    assert img.mode == "RGB"
    assert img.size == measure("Hi")


def test_rasterize_has_content():
    from textart import rasterize
    arr = np.array(rasterize("Hi"))
    assert arr.max() > 0  # some text was drawn
    assert arr.min() == 0  # background is black


def test_rasterize_empty_text():
    from textart import InvalidDimension, rasterize
    with pytest.raises(InvalidDimension):
        rasterize("")


def test_reproducibility():
    from textart import FontConfig, rasterize
    config = FontConfig(family="Serif", size=20)
    arr1 = np.array(rasterize("Hi", config))
    arr2 = np.array(rasterize("Hi", config))
    np.testing.assert_array_equal(arr1, arr2)


def test_generate():
    from textart import FontStyle, generate
    img = generate("Hi", size=16, styles={FontStyle.ITALIC})
    assert img.mode == "RGB"
    assert img.size[0] > 0


def test_png_file_round_trip(tmp_path):
    from textart import FontConfig, encode_to_file, measure
    config = FontConfig(family="Serif", size=12)
    path = tmp_path / "hi.png"
    encode_to_file("Hi", config, path)
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size == measure("Hi", config)


def test_extension_is_case_insensitive(tmp_path):
    from textart import FontConfig, encode_to_file
    path = tmp_path / "hi.PNG"
    encode_to_file("Hi", FontConfig(), path)
    with Image.open(path) as img:
        assert img.format == "PNG"


def test_unsupported_extension(tmp_path):
    from textart import FontConfig, UnsupportedFormat, encode_to_file
    path = tmp_path / "hi.xyz"
    with pytest.raises(UnsupportedFormat):
        encode_to_file("Hi", FontConfig(), path)
    assert not path.exists()
    assert list(tmp_path.iterdir()) == []


def test_missing_extension(tmp_path):
    from textart import FontConfig, UnsupportedFormat, encode_to_file
    with pytest.raises(UnsupportedFormat):
        encode_to_file("Hi", FontConfig(), tmp_path / "hi")


def test_empty_text_creates_no_file(tmp_path):
    from textart import FontConfig, InvalidDimension, encode_to_file
    path = tmp_path / "empty.png"
    with pytest.raises(InvalidDimension):
        encode_to_file("", FontConfig(), path)
    assert not path.exists()


def test_write_into_missing_directory(tmp_path):
    from textart import FontConfig, OutputError, encode_to_file
    with pytest.raises(OutputError) as info:
        encode_to_file("Hi", FontConfig(), tmp_path / "nope" / "hi.png")
    assert isinstance(info.value, OSError)


class _FailingFile:
    """File wrapper whose write stores a few bytes, then fails."""

    def __init__(self, fh):
        self.fh = fh

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.fh.close()

    def write(self, data):
        self.fh.write(data[:8])
        self.fh.flush()
        raise OSError(28, "No space left on device")


def test_failed_write_removes_partial_file(tmp_path, monkeypatch):
    import textart.renderer as renderer_module
    from textart import FontConfig, OutputError, encode_to_file

    real_open = open

    def failing_open(path, mode="r", *args, **kwargs):
        return _FailingFile(real_open(path, mode, *args, **kwargs))

    monkeypatch.setattr(renderer_module, "open", failing_open, raising=False)
    path = tmp_path / "hi.png"
    with pytest.raises(OutputError):
        encode_to_file("Hi", FontConfig(), path)
    assert not path.exists()


def test_encode_to_file_returns_size(tmp_path):
    from textart import FontConfig, encode_to_file
    path = tmp_path / "hi.bmp"
    size = encode_to_file("Hi", FontConfig(), path)
    with Image.open(path) as img:
        assert img.size == size


@pytest.mark.parametrize("fmt,expected", [
    ("png", "PNG"),
    ("PNG", "PNG"),
    ("jpeg", "JPEG"),
    ("jpg", "JPEG"),
    ("bmp", "BMP"),
    ("gif", "GIF"),
])
def test_encode_to_stream(fmt, expected):
    from textart import FontConfig, encode_to_stream, measure
    config = FontConfig()
    buf = io.BytesIO()
    encode_to_stream("Hi", config, fmt, buf)
    buf.seek(0)
    with Image.open(buf) as img:
        assert img.format == expected
        assert img.size == measure("Hi", config)


def test_encode_to_stream_unknown_format():
    from textart import FontConfig, UnsupportedFormat, encode_to_stream
    buf = io.BytesIO()
    with pytest.raises(UnsupportedFormat):
        encode_to_stream("Hi", FontConfig(), "xyz", buf)
    assert buf.getvalue() == b""


def test_encode_to_stream_write_failure():
    from textart import FontConfig, OutputError, encode_to_stream

    class BrokenStream:
        def write(self, data):
            raise OSError("disk full")

    with pytest.raises(OutputError):
        encode_to_stream("Hi", FontConfig(), "png", BrokenStream())


def test_encode_to_closed_stream():
    from textart import FontConfig, OutputError, encode_to_stream
    buf = io.BytesIO()
    buf.close()
    with pytest.raises(OutputError):
        encode_to_stream("Hi", FontConfig(), "png", buf)


def test_encode_to_text_stream():
    from textart import FontConfig, OutputError, RenderError, encode_to_stream
    with pytest.raises(OutputError) as info:
        encode_to_stream("Hi", FontConfig(), "png", io.StringIO())
    assert isinstance(info.value, RenderError)


def test_encode_bytes_are_png():
    from textart import FontConfig, Renderer
    data = Renderer().encode("Hi", FontConfig(), "png")
    assert data.startswith(b"\x89PNG\r\n\x1a\n")


def test_ascii_art_hi():
    from textart import FontConfig, FontStyle, measure, to_ascii_art
    config = FontConfig(family="Serif", size=12, styles={FontStyle.BOLD})
    width, height = measure("Hi", config)
    art = to_ascii_art("Hi", config)
    assert art
    lines = art.split(os.linesep)
    assert lines[-1] == ""  # every row is terminated
    lines = lines[:-1]
    assert 1 <= len(lines) <= height
    for line in lines:
        assert len(line) == width
        assert set(line) <= {" ", "#", "*"}
        assert line.strip()


@pytest.mark.parametrize("text", ["Hello", "ASCII art!", "xyz"])
def test_ascii_art_has_no_blank_lines(text):
    from textart import to_ascii_art
    art = to_ascii_art(text, line_separator="\n")
    assert set(art) <= {" ", "#", "*", "\n"}
    for line in art.splitlines():
        assert line.strip() != ""


class _PatternBackend:
    """Backend drawing a fixed 4x3 pixel pattern."""

    def __init__(self):
        self.origins = []

    def measure_text(self, text, resolved):
        return 4, 3

    def draw_text(self, image, text, resolved, origin):
        self.origins.append(origin)
        image.putpixel((0, 0), (255, 255, 255))
        image.putpixel((1, 0), (128, 128, 128))
        image.putpixel((2, 0), (255, 255, 254))
        image.putpixel((3, 2), (255, 255, 255))
        image.putpixel((0, 2), (0, 0, 1))


def test_ascii_quantization():
    from textart import FontConfig, Renderer
    renderer = Renderer(backend=_PatternBackend())
    art = renderer.to_ascii_art("x", FontConfig(), line_separator="\n")
    # middle row is all black and is dropped
    assert art == "#** \n*  #\n"


def test_baseline_at_point_size():
    from textart import FontConfig, Renderer
    backend = _PatternBackend()
    Renderer(backend=backend).rasterize("x", FontConfig(size=30))
    assert backend.origins == [(0, 30)]


def test_zero_height_backend():
    from textart import FontConfig, InvalidDimension, Renderer

    class FlatBackend(_PatternBackend):
        def measure_text(self, text, resolved):
            return 5, 0

    with pytest.raises(InvalidDimension) as info:
        Renderer(backend=FlatBackend()).rasterize("x", FontConfig())
    assert (info.value.width, info.value.height) == (5, 0)
