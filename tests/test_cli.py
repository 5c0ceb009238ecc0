"""Tests for the command line runner."""

import logging

import pytest

from src import cli


class TestParser:
    """Tests for argument parsing."""

    def test_watch_defaults(self):
        args = cli.build_parser().parse_args(["watch"])
        assert args.root == ""
        assert args.recursive is False
        assert args.types is None
        assert args.once is False

    def test_watch_options(self):
        args = cli.build_parser().parse_args([
            "watch", "--base", "proj/Assets", "--root", "textures",
            "--recursive", "--types", "texture", "audio", "--interval", "250",
        ])
        assert args.base == "proj/Assets"
        assert args.types == ["texture", "audio"]
        assert args.interval == 250

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1
        assert "watch" in capsys.readouterr().out


class TestBuildConfig:
    """Tests for environment fallbacks."""

    def test_environment_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ASSETWATCH_BASE_PATH", str(tmp_path))
        monkeypatch.setenv("ASSETWATCH_SCAN_INTERVAL_MS", "300")
        config = cli.build_config(cli.build_parser().parse_args(["watch"]))
        assert config.base_path == tmp_path.resolve()
        assert config.scan_interval_ms == 300

    def test_arguments_win_over_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ASSETWATCH_SCAN_INTERVAL_MS", "300")
        args = cli.build_parser().parse_args(["watch", "--base", str(tmp_path), "--interval", "50"])
        assert cli.build_config(args).scan_interval_ms == 50


class TestWatchCommand:
    """Tests for the watch command."""

    def test_missing_base_fails(self, tmp_path):
        assert cli.main(["watch", "--base", str(tmp_path / "missing"), "--once"]) == 1

    def test_unknown_type_fails(self, tmp_path):
        assert cli.main(["watch", "--base", str(tmp_path), "--types", "sprites", "--once"]) == 1

    def test_once_reports_existing(self, tmp_path, caplog):
        (tmp_path / "wall.png").write_bytes(b"wall")
        with caplog.at_level(logging.INFO, logger="cli"):
            code = cli.main([
                "watch", "--base", str(tmp_path), "--interval", "10",
                "--report-existing", "--once",
            ])
        assert code == 0
        assert "Created asset 'wall.png' of type texture" in caplog.text
