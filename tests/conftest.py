"""Shared test fixtures for the Video Editor bridge."""

import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import Callable, Sequence
from unittest.mock import MagicMock

import pytest
from PIL import Image

from video_editor.services.host_environment import (
    DictContentResolver,
    HostEnvironment,
    MediaScanner,
)
from video_editor.services.thumbnail_service import ThumbnailGenerator

FAKE_FFMPEG_TEMPLATE = """#!{python}
import sys

for line in {lines!r}:
    sys.stdout.write(line)
    sys.stdout.flush()
if {create_output!r} and len(sys.argv) > 1:
    with open(sys.argv[-1], "wb") as f:
        f.write(b"fake media")
sys.exit({exit_code!r})
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def input_video(temp_dir: Path) -> Path:
    """Create a small placeholder input video."""
    video = temp_dir / "input" / "clip.mp4"
    video.parent.mkdir()
    video.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return video


@pytest.fixture
def make_fake_ffmpeg(temp_dir: Path) -> Callable[..., str]:
    """
    Return a factory that writes an executable script standing in for ffmpeg.

    The script prints the given chunks verbatim, optionally creates the file named
    by its last argument, and exits with the given code.
    """
    if sys.platform == "win32":
        pytest.skip("fake ffmpeg scripts rely on a POSIX shebang")

    counter = iter(range(1000))

    def factory(
        lines: Sequence[str] = ("L1\n", "L2\n", "L3\n"),
        exit_code: int = 0,
        create_output: bool = True,
    ) -> str:
        script = temp_dir / "bin" / f"ffmpeg_{next(counter)}"
        script.parent.mkdir(exist_ok=True)
        script.write_text(
            FAKE_FFMPEG_TEMPLATE.format(
                python=sys.executable,
                lines=list(lines),
                create_output=create_output,
                exit_code=exit_code,
            )
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return factory


class FakeThumbnailGenerator(ThumbnailGenerator):
    """Returns a solid image instead of decoding the video."""

    def __init__(self, size=(320, 240)):
        self.size = size
        self.calls = []

    def create_video_thumbnail(self, video_path):
        self.calls.append(video_path)
        return Image.new("RGB", self.size, color=(200, 30, 30))


@pytest.fixture
def media_scanner() -> MagicMock:
    return MagicMock(spec=MediaScanner)


@pytest.fixture
def make_host(temp_dir: Path, media_scanner: MagicMock) -> Callable[..., HostEnvironment]:
    """Return a factory for HostEnvironments rooted in the temporary directory."""

    def factory(ffmpeg_binary: str = "ffmpeg", **overrides) -> HostEnvironment:
        settings = dict(
            app_name="TestApp",
            external_storage_dir=temp_dir / "storage",
            cache_dir=temp_dir / "cache",
            external_cache_dir=temp_dir / "external_cache",
            ffmpeg_binary=ffmpeg_binary,
            content_resolver=DictContentResolver(),
            media_scanner=media_scanner,
            thumbnail_generator=FakeThumbnailGenerator(),
        )
        settings.update(overrides)
        return HostEnvironment(**settings)

    return factory


@pytest.fixture
def host(make_host) -> HostEnvironment:
    return make_host()
