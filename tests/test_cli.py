from PIL import Image as PILImage

from cli.make_sprite import main


def write_source(tmp_path, png_bytes):
    path = tmp_path / "dragon.png"
    path.write_bytes(png_bytes)
    return path


def test_explicit_output(tmp_path, png_bytes):
    source = write_source(tmp_path, png_bytes)
    out = tmp_path / "out.png"

    assert main([str(source), "-o", str(out), "--size", "8"]) == 0

    with PILImage.open(out) as img:
        assert img.size == (8, 8)
        assert img.getpixel((0, 0))[3] == 0


def test_keep_background(tmp_path, png_bytes):
    source = write_source(tmp_path, png_bytes)
    out = tmp_path / "out.png"

    assert main([str(source), "-o", str(out), "--size", "4", "--keep-background"]) == 0

    with PILImage.open(out) as img:
        assert img.getpixel((0, 0)) == (200, 200, 200, 255)


def test_named_from_prompt(tmp_path, png_bytes):
    source = write_source(tmp_path, png_bytes)

    assert main([str(source), "--output-dir", str(tmp_path / "sprites"),
                 "--size", "16", "--prompt", "Red Dragon"]) == 0
    assert (tmp_path / "sprites" / "red_dragon_16x16.png").is_file()


def test_named_from_input_stem(tmp_path, png_bytes):
    source = write_source(tmp_path, png_bytes)

    assert main([str(source), "--output-dir", str(tmp_path), "--size", "16"]) == 0
    assert (tmp_path / "dragon_16x16.png").is_file()


def test_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.png"), "--size", "8"]) == 1


def test_invalid_size(tmp_path, png_bytes):
    source = write_source(tmp_path, png_bytes)
    assert main([str(source), "--size", "0", "-o", str(tmp_path / "x.png")]) == 1
