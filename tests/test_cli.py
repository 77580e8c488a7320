import pytest

from postcard_extractor import cli, scan_io
from postcard_extractor.config import ExtractorConfig


@pytest.mark.parametrize("argv", [[], ["--help"], ["-h"], ["scan.jpg", "--help"], ["--suffix", "_pc"]])
def test_help_or_no_images_exits(argv, monkeypatch, capsys):
    def fail(path):
        raise AssertionError("no image should be decoded")

    monkeypatch.setattr(scan_io, "read_scan", fail)
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 0
    assert "Synopsis" in capsys.readouterr().out


def test_options_reach_config():
    args, extra = cli.build_parser().parse_known_intermixed_args(
        ["a.jpg", "--suffix", "_card", "--zoom-level", "12", "--no-auto-rotate", "b.jpg"]
    )
    assert args.images == ["a.jpg", "b.jpg"]
    assert extra == []
    cfg = ExtractorConfig.from_args(args)
    assert cfg.postcard_suffix == "_card"
    assert cfg.default_zoom_level == 12.0
    assert cfg.auto_rotate is False


def test_defaults_without_options():
    args, _ = cli.build_parser().parse_known_intermixed_args(["a.jpg"])
    cfg = ExtractorConfig.from_args(args)
    assert cfg.postcard_suffix == "_postcard"
    assert cfg.default_zoom_level == 50.0
    assert cfg.auto_rotate is True


def test_main_starts_window_with_loaded_session(scan_files, monkeypatch):
    pytest.importorskip("tkinter")
    pytest.importorskip("PIL.ImageTk")
    from postcard_extractor import app

    started = []
    monkeypatch.setattr(app, "run", lambda session: started.append(session))
    assert cli.main([scan_files[0], "--suffix", "_x"]) == 0
    assert len(started) == 1
    assert started[0].scan.path == scan_files[0]
    assert started[0].cfg.postcard_suffix == "_x"
