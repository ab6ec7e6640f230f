"""End-to-end tests for the command line entry point."""

import base64
import logging
from pathlib import Path

import pytest

from mail_inline import cli
from mail_inline.config import InlineConfig


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:  # pylint: disable=unidiomatic-typecheck
            root.removeHandler(handler)
    root.setLevel(level)


class RecordingEngine:
    """Stands in for css-inline and remembers what it was given."""

    def __init__(self) -> None:
        self.calls = []

    def inline(self, html: str, base_url: str) -> str:
        self.calls.append((html, base_url))
        return html.replace("<p>", '<p style="color: red;">')


class FailingEngine:
    def inline(self, html: str, base_url: str) -> str:
        raise RuntimeError("cannot load stylesheet styles/missing.css")


def _write_input(directory: Path, html: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "mail.html"
    path.write_text(html, encoding="utf-8")
    return path


def test_missing_arguments_print_usage(capsys, monkeypatch):
    def _fail(*_args, **_kwargs):
        raise AssertionError("no file should be read")

    monkeypatch.setattr(Path, "read_text", _fail)
    monkeypatch.setattr(Path, "read_bytes", _fail)

    for argv in ([], ["only-input.html"]):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(argv)
        assert excinfo.value.code != 0
        assert "usage:" in capsys.readouterr().err


def test_end_to_end_with_real_engine(tmp_path: Path, png_bytes, capsys):
    src = tmp_path / "src"
    src.mkdir()
    (src / "logo.png").write_bytes(png_bytes)
    (src / "bg.png").write_bytes(png_bytes)
    input_path = _write_input(
        src,
        "<html><head><style>"
        "p { color: red; } td { background: url(bg.png); }"
        "</style></head><body>"
        '<p>Hi</p><img alt="logo" src="logo.png"><img src="missing.png">'
        "<table><tr><td>x</td></tr></table>"
        "</body></html>",
    )
    output_path = tmp_path / "dist" / "mail.html"

    cli.main([str(input_path), str(output_path)])

    result = output_path.read_text(encoding="utf-8")
    encoded = base64.b64encode(png_bytes).decode("ascii")
    assert f"data:image/png;base64,{encoded}" in result
    assert 'src="missing.png"' in result
    assert 'style="color: red;"' in result
    assert "<style>" not in result

    err = capsys.readouterr().err
    assert "missing.png" in err
    assert f"Saved inlined HTML to {output_path}" in err


def test_base_url_points_at_input_directory(tmp_path: Path):
    input_path = _write_input(tmp_path / "nested dir", "<p>x</p>")
    engine = RecordingEngine()

    cli.main([str(input_path), str(tmp_path / "out.html")], engine=engine)

    (_, base_url), = engine.calls
    assert base_url == (tmp_path / "nested dir").resolve().as_uri() + "/"
    assert (tmp_path / "out.html").read_text(encoding="utf-8") == '<p style="color: red;">x</p>'


def test_missing_image_keeps_exit_status_zero(tmp_path: Path, capsys):
    input_path = _write_input(tmp_path, '<img src="missing.png">')
    output_path = tmp_path / "out.html"

    cli.main([str(input_path), str(output_path)], engine=RecordingEngine())

    assert output_path.read_text(encoding="utf-8") == '<img src="missing.png">'
    assert "Image not found, skipping: missing.png" in capsys.readouterr().err


def test_css_failure_writes_nothing(tmp_path: Path, capsys):
    input_path = _write_input(tmp_path, "<p>x</p>")
    output_path = tmp_path / "out.html"

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(input_path), str(output_path)], engine=FailingEngine())

    assert excinfo.value.code == 1
    assert not output_path.exists()
    assert list(tmp_path.iterdir()) == [input_path]
    assert "cannot load stylesheet styles/missing.css" in capsys.readouterr().err


def test_css_failure_does_not_overwrite_existing_output(tmp_path: Path):
    input_path = _write_input(tmp_path, "<p>x</p>")
    output_path = tmp_path / "out.html"
    output_path.write_text("previous", encoding="utf-8")

    with pytest.raises(SystemExit):
        cli.main([str(input_path), str(output_path)], engine=FailingEngine())

    assert output_path.read_text(encoding="utf-8") == "previous"


def test_unreadable_input_exits_non_zero(tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "nope.html"), str(tmp_path / "out.html")])

    assert excinfo.value.code == 1
    assert "Error reading input file" in capsys.readouterr().err
    assert not (tmp_path / "out.html").exists()


def test_build_config_flags(tmp_path: Path):
    extra = tmp_path / "extra.css"
    extra.write_text("p { margin: 0; }", encoding="utf-8")

    args = cli.parse_args(
        [
            "in.html",
            "out.html",
            "--no-style-urls",
            "--svg-base64",
            "--sniff-types",
            "--no-remote-stylesheets",
            "--keep-style-tags",
            "--extra-css",
            str(extra),
        ]
    )
    config = cli.build_config(args)

    assert config == InlineConfig(
        input_path=Path("in.html"),
        output_path=Path("out.html"),
        inline_style_urls=False,
        svg_as_text=False,
        sniff_unknown_types=True,
        load_remote_stylesheets=False,
        keep_style_tags=True,
        extra_css="p { margin: 0; }",
    )


def test_no_style_urls_leaves_css_references(tmp_path: Path, png_bytes):
    (tmp_path / "bg.png").write_bytes(png_bytes)
    html = '<div style="background:url(bg.png)"><img src="bg.png"></div>'
    input_path = _write_input(tmp_path, html)
    output_path = tmp_path / "out.html"

    cli.main([str(input_path), str(output_path), "--no-style-urls"], engine=RecordingEngine())

    result = output_path.read_text(encoding="utf-8")
    assert 'style="background:url(bg.png)"' in result
    assert "<img src=\"data:image/png;base64," in result


def test_linked_stylesheet_resolves_from_input_directory(tmp_path: Path, monkeypatch):
    src = tmp_path / "src"
    (src / "css").mkdir(parents=True)
    (src / "css" / "s.css").write_text("p { color: blue; }", encoding="utf-8")
    input_path = _write_input(
        src,
        '<html><head><link rel="stylesheet" href="css/s.css"></head>'
        "<body><p>Hi</p></body></html>",
    )
    output_path = tmp_path / "dist" / "mail.html"
    monkeypatch.chdir(tmp_path)

    cli.main([str(input_path), str(output_path)])

    result = output_path.read_text(encoding="utf-8")
    assert '<p style="color: blue;">Hi</p>' in result
    assert "<link" not in result


def test_unstattable_asset_is_a_warning(tmp_path: Path, capsys):
    html = f'<img src="{"a" * 300}.png">'
    input_path = _write_input(tmp_path, html)
    output_path = tmp_path / "out.html"

    cli.main([str(input_path), str(output_path)], engine=RecordingEngine())

    assert output_path.read_text(encoding="utf-8") == html
    assert "Image not found, skipping" in capsys.readouterr().err
