import pytest
from PIL import Image

from chrome_paint import cli


def test_dark_shade_printed(capsys):
    cli.main(["--color", "#FF0000", "--shade", "dark"])
    assert capsys.readouterr().out.strip() == "#FF550000"


def test_default_shade_is_light(capsys):
    cli.main(["--color", "#FF0000"])
    assert capsys.readouterr().out.strip() == "#FFFF4040"


def test_percent_passed_through(capsys):
    cli.main(["--color", "#FF0000", "--shade", "light", "--percent", "1"])
    assert capsys.readouterr().out.strip() == "#FFFF8080"


@pytest.mark.parametrize("color, expected", [("#7E7E7E", "true"), ("#808080", "false")])
def test_is_dark(capsys, color, expected):
    cli.main(["--color", color, "--shade", "is-dark"])
    assert capsys.readouterr().out.strip() == expected


def test_preset_sets_defaults(tmp_path, capsys):
    preset = tmp_path / "preset.yaml"
    preset.write_text("shade: dark\npercent: 0.0\n")

    args = cli.parse_args(["--color", "#00FF00", "--preset", str(preset)])
    assert args.shade == "dark"
    assert args.percent == 0.0

    args_cli = cli.parse_args(
        ["--color", "#00FF00", "--preset", str(preset), "--percent", "0.25"]
    )
    assert args_cli.percent == 0.25


@pytest.mark.parametrize(
    "argv, needle",
    [
        ([], "nothing to do"),
        (["--color", "#FF0000", "--input", "a.png"], "conflict"),
        (["--color", "red"], "--color"),
        (["--color", "#FF0000", "--percent", "nan"], "finite"),
        (["--color", "#FF0000", "--percent", "50"], "out of range"),
        (["--color", "#FF0000", "--shade", "dark-dark", "--percent", "0.5"], "no effect"),
        (["--input", "a.png"], "--output"),
        (["--input", "a.png", "--output", "b.bmp", "--mask", "m.png"], "--mask"),
        (["--input", "a.png", "--output", "b.bmp", "--background", "#12"], "--background"),
    ],
)
def test_validation_errors(capsys, argv, needle):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--validate"] + argv)
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "validation error" in err
    assert needle in err


def test_validate_only_does_nothing(capsys):
    cli.main(["--validate", "--color", "#FF0000"])
    assert capsys.readouterr().out == ""


def test_transparency_mask_written(tmp_path):
    src = tmp_path / "src.png"
    img = Image.new("RGBA", (3, 1), (50, 100, 150, 255))
    img.putpixel((2, 0), (0, 0, 0, 0))
    img.save(src)
    out = tmp_path / "mask.png"

    cli.main(["--input", str(src), "--output", str(out), "--kind", "transparency-mask"])

    with Image.open(out) as result:
        assert result.mode == "1"
        assert result.size == (3, 1)
        assert result.getpixel((0, 0)) == 0
        assert result.getpixel((2, 0)) == 255


def test_composite16_written(tmp_path):
    src = tmp_path / "src.png"
    Image.new("RGBA", (2, 2), (50, 100, 150, 255)).save(src)
    out = tmp_path / "out.png"

    cli.main(["--input", str(src), "--output", str(out), "--background", "#FF0000"])

    with Image.open(out) as result:
        assert result.mode == "RGB"
        assert result.getpixel((1, 1)) == (49, 99, 148)


def test_color_mask_with_mask_file(tmp_path):
    src = tmp_path / "src.png"
    Image.new("RGBA", (2, 1), (50, 100, 150, 255)).save(src)
    mask = tmp_path / "mask.png"
    mono = Image.new("1", (2, 1), 0)
    mono.putpixel((0, 0), 1)
    mono.save(mask)
    out = tmp_path / "out.png"

    cli.main(
        [
            "--input", str(src),
            "--output", str(out),
            "--kind", "color-mask",
            "--mask", str(mask),
        ]
    )

    with Image.open(out) as result:
        assert result.getpixel((0, 0)) == (0, 0, 0)
        assert result.getpixel((1, 0)) == (50, 100, 150)


def test_missing_input_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--input", str(tmp_path / "nope.png"), "--output", str(tmp_path / "o.png")])
    assert "failed to convert" in str(exc.value.code)


class _TrackedOpen:
    def __init__(self, image):
        self.image = image
        self.exited = False

    def __enter__(self):
        return self.image.__enter__()

    def __exit__(self, *exc):
        self.exited = True
        return self.image.__exit__(*exc)


def test_input_and_mask_files_are_closed(tmp_path, monkeypatch):
    src = tmp_path / "src.png"
    Image.new("RGBA", (2, 1), (50, 100, 150, 255)).save(src)
    mask = tmp_path / "mask.png"
    Image.new("1", (2, 1), 1).save(mask)
    out = tmp_path / "out.png"

    real_open = Image.open
    opened = []

    def tracking_open(path, *a, **kw):
        handle = _TrackedOpen(real_open(path, *a, **kw))
        opened.append(handle)
        return handle

    monkeypatch.setattr(cli.Image, "open", tracking_open)
    cli.main(
        [
            "--input", str(src),
            "--output", str(out),
            "--kind", "color-mask",
            "--mask", str(mask),
        ]
    )
    monkeypatch.undo()

    assert len(opened) == 2
    assert all(h.exited for h in opened)
    with Image.open(out) as result:
        assert result.getpixel((0, 0)) == (0, 0, 0)
