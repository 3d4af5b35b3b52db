"""Tests for the command-line interface."""

from argparse import Namespace
from unittest.mock import patch

import pytest
from loguru import logger

from video_editor.cli import build_action, get_args, main


@pytest.fixture(autouse=True)
def reset_logger():
    """main() reconfigures the global logger; drop its handlers afterwards."""
    yield
    logger.remove()


class TestGetArgs:
    def test_trim_arguments(self):
        args = get_args(["--log-level", "DEBUG", "trim", "/v/a.mp4", "--start", "2", "--end", "7.5"])

        assert args.command == "trim"
        assert args.log_level == "DEBUG"
        assert args.start == 2.0
        assert args.end == 7.5

    def test_trim_requires_end(self):
        with pytest.raises(SystemExit):
            get_args(["trim", "/v/a.mp4"])

    def test_workers_must_be_positive(self):
        with pytest.raises(SystemExit):
            get_args(["--workers", "0", "thumbnail", "/v/a.mp4"])


class TestBuildAction:
    """Tests for translating arguments into host actions."""

    def test_transcode(self):
        args = get_args(["transcode", "/v/a.mp4", "--quality", "low", "--format", "quick_time", "--no-library"])

        action, options = build_action(args)

        assert action == "transcodeVideo"
        assert options == {
            "fileUri": "/v/a.mp4",
            "quality": 2,
            "outputFileType": 3,
            "saveToLibrary": False,
            "deleteInputFile": False,
            "duration": 0.0,
        }

    def test_thumbnail_with_name(self):
        action, options = build_action(get_args(["thumbnail", "/v/a.mp4", "--output-name", "poster"]))

        assert action == "createThumbnail"
        assert options == {"fileUri": "/v/a.mp4", "outputFileName": "poster"}

    def test_exec(self):
        action, options = build_action(Namespace(command="exec", ffmpeg_args=["-i", "a.mp4", "b.mp4"]))

        assert action == "execFFMPEG"
        assert options == {"cmd": ["-i", "a.mp4", "b.mp4"]}


class TestMain:
    """Tests for main."""

    def test_exits_when_ffmpeg_unavailable(self):
        with patch("video_editor.cli.verify_ffmpeg", return_value=False):
            assert main(["thumbnail", "/v/a.mp4"]) == 1

    def test_trim_prints_output_path(self, make_host, make_fake_ffmpeg, input_video, capsys):
        host = make_host(make_fake_ffmpeg())

        with (
            patch("video_editor.cli.HostEnvironment", return_value=host),
            patch("video_editor.cli.verify_ffmpeg", return_value=True),
        ):
            exit_code = main(["trim", str(input_video), "--end", "1", "--output-name", "cut"])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == str(host.cache_dir / "mp4" / "cut.mp4")

    def test_failure_returns_one(self, make_host, temp_dir):
        with (
            patch("video_editor.cli.HostEnvironment", return_value=make_host()),
            patch("video_editor.cli.verify_ffmpeg", return_value=True),
        ):
            assert main(["thumbnail", str(temp_dir / "missing.mp4")]) == 1
