import pytest
from PIL import Image

from imgii.codec import FrameMetadata, open_image, read_gif_frames, save_image, write_gif
from imgii.errors import CodecError, EmptyInputError, ErrorKind

COLOURS = [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255)]


def make_frames(size=(6, 4), delays=(50, 120, 200)):
    return [(Image.new("RGBA", size, colour), FrameMetadata(0, 0, delay)) for colour, delay in zip(COLOURS, delays)]


def test_gif_roundtrip_keeps_timing(tmp_path):
    path = tmp_path / "out.gif"
    write_gif(path, make_frames())
    frames = read_gif_frames(path)
    assert [meta.delay for _, meta in frames] == [50, 120, 200]
    assert all(image.size == (6, 4) for image, _ in frames)
    assert all(image.mode == "RGBA" for image, _ in frames)
    assert frames[1][0].getpixel((0, 0))[:3] == (0, 255, 0)


def test_gif_loops_forever(tmp_path):
    path = tmp_path / "out.gif"
    write_gif(path, make_frames())
    with Image.open(path) as image:
        assert image.info.get("loop") == 0
        assert image.n_frames == 3


def test_offsets_grow_the_canvas(tmp_path):
    path = tmp_path / "out.gif"
    frames = [
        (Image.new("RGBA", (4, 4), COLOURS[0]), FrameMetadata(0, 0, 100)),
        (Image.new("RGBA", (4, 4), COLOURS[1]), FrameMetadata(2, 3, 100)),
    ]
    write_gif(path, frames)
    decoded = read_gif_frames(path)
    assert decoded[0][0].size == (6, 7)
    assert decoded[1][0].getpixel((5, 6))[:3] == (0, 255, 0)


def test_missing_duration_uses_default(tmp_path):
    path = tmp_path / "still.gif"
    Image.new("RGB", (3, 3), (1, 2, 3)).save(path)
    ((_, meta),) = read_gif_frames(path)
    assert meta == FrameMetadata(0, 0, 100)


def test_write_nothing():
    with pytest.raises(EmptyInputError):
        write_gif("unused.gif", [])


def test_unwritable_gif(tmp_path):
    with pytest.raises(CodecError) as info:
        write_gif(tmp_path / "no" / "such" / "dir.gif", make_frames())
    assert info.value.kind is ErrorKind.CODEC


def test_undecodable_gif(tmp_path):
    path = tmp_path / "bad.gif"
    path.write_bytes(b"this is not an image")
    with pytest.raises(CodecError):
        read_gif_frames(path)


def test_open_missing_image(tmp_path):
    with pytest.raises(CodecError) as info:
        open_image(tmp_path / "missing.png")
    assert info.value.path.endswith("missing.png")


def test_save_and_open(tmp_path):
    path = tmp_path / "x.png"
    save_image(Image.new("RGBA", (2, 2), (9, 8, 7, 255)), path)
    assert open_image(path).getpixel((1, 1)) == (9, 8, 7, 255)


def test_save_to_missing_directory(tmp_path):
    with pytest.raises(CodecError):
        save_image(Image.new("RGBA", (2, 2)), tmp_path / "missing" / "x.png")
