"""
This module turns validated requests into ffmpeg argument vectors.

`CommandBuilder` knows where each operation writes its output, makes sure the
target directories exist, and assembles the argv the `ProcessRunner` executes.
Thumbnails are produced without ffmpeg's command line, so for them only the
paths are prepared.
"""
from pathlib import Path

from loguru import logger

from ..config.video import (
    THUMBNAIL_EXTENSION,
    THUMBNAIL_OUTPUT_PREFIX,
    TRANSCODE_AUDIO_CHANNELS,
    TRANSCODE_OUTPUT_PREFIX,
    TRANSCODE_VIDEO_BITRATE_KBPS,
    TRANSCODE_VIDEO_CODEC,
    TRANSCODE_VIDEO_FPS,
)
from ..domain.exceptions import DirectoryUnavailable, InvalidLocator, InvalidRange
from ..domain.models import BuiltCommand, ResolvedPaths
from ..domain.requests import Operation, TranscodeRequest
from ..utils.format_utils import duration_format
from .host_environment import HostEnvironment


def ensure_directory(directory: Path, error_message: str) -> Path:
    """
    Creates `directory` (and parents) if needed. Safe to call repeatedly.

    Raises:
        DirectoryUnavailable: With `error_message` if the directory cannot be created.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {e}")
        raise DirectoryUnavailable(error_message) from e
    if not directory.is_dir():
        raise DirectoryUnavailable(error_message)
    return directory


def scale_filter(max_dimension: int) -> str:
    """
    Video filter that bounds width and height by `max_dimension`.

    The aspect ratio is kept, inputs already smaller than the cap are not
    upscaled, and both output dimensions are even (libx264 requires it).
    """
    return (
        f"scale=w='min({max_dimension},iw)':h='min({max_dimension},ih)'"
        ":force_original_aspect_ratio=decrease:force_divisible_by=2"
    )


class CommandBuilder:
    """
    Prepares the command and output location for a request.

    Args:
        host: Supplies the ffmpeg binary and the storage directories.
    """

    def __init__(self, host: HostEnvironment):
        self.host = host
        self._builders = {
            Operation.TRANSCODE: self._build_transcode,
            Operation.TRIM: self._build_trim,
            Operation.THUMBNAIL: self._build_thumbnail,
        }

    def build(self, request: TranscodeRequest, input_path: Path | None = None) -> BuiltCommand:
        """
        Builds the command for `request`.

        Args:
            request: The validated request.
            input_path: The resolved input file. Not used by raw commands.

        Returns:
            A BuiltCommand. For raw commands `paths` is None; for thumbnails
            `argv` is empty.

        Raises:
            DirectoryUnavailable: If an output directory cannot be created.
            InvalidRange: If a trim range is empty.
            InvalidLocator: If a trim input has no file extension.
        """
        if request.operation is Operation.RAW_COMMAND:
            return BuiltCommand(argv=(self.host.ffmpeg_binary, *request.raw_args))

        if input_path is None:
            raise InvalidLocator(f"{request.operation.value}: no input file")

        built = self._builders[request.operation](request, Path(input_path))
        logger.debug(f"Built {request.operation.value} command, output: {built.output_path}")
        return built

    def _build_transcode(self, request: TranscodeRequest, input_path: Path) -> BuiltCommand:
        # 1. Decide where the result goes: the library folder or the shared cache.
        if request.save_to_library:
            output_dir = ensure_directory(self.host.library_dir, "Can't access or make Movies directory")
        else:
            output_dir = ensure_directory(self.host.external_cache_dir, "Can't access or make Movies directory")
        work_dir = ensure_directory(self.host.cache_dir, "Can't access or make temporary cache directory")

        output_path = output_dir / f"{TRANSCODE_OUTPUT_PREFIX}{request.output_name}{request.container_format.extension}"

        # 2. Assemble the argument vector.
        argv = [self.host.ffmpeg_binary, "-y", "-i", str(input_path)]
        if request.duration > 0:
            argv.extend(["-t", f"{request.duration:f}"])
        argv.extend(["-b:v", f"{TRANSCODE_VIDEO_BITRATE_KBPS}k"])
        argv.extend(["-vf", scale_filter(request.quality.max_dimension)])
        argv.extend(["-r", TRANSCODE_VIDEO_FPS])
        argv.extend(["-vcodec", TRANSCODE_VIDEO_CODEC])
        argv.extend(["-ac", str(TRANSCODE_AUDIO_CHANNELS)])
        # The native AAC encoder is still "experimental" on older ffmpeg builds.
        argv.extend(["-strict", "-2"])
        argv.append(str(output_path))

        return BuiltCommand(
            argv=tuple(argv),
            paths=ResolvedPaths(input_path=input_path, output_path=output_path, work_dir=work_dir),
        )

    def _build_trim(self, request: TranscodeRequest, input_path: Path) -> BuiltCommand:
        duration = request.trim_duration
        if duration <= 0:
            raise InvalidRange("trim: failed to trim video; duration is 0")

        extension = input_path.suffix
        if not extension:
            raise InvalidLocator(f"trim: input file has no extension: {input_path.name}")

        # Trims are grouped by container, e.g. <cache>/mp4/clip.mp4.
        output_dir = ensure_directory(
            self.host.cache_dir / extension.lstrip("."), "Can't access or make temporary cache directory"
        )
        output_path = output_dir / f"{request.output_name}{extension}"

        argv = (
            self.host.ffmpeg_binary,
            "-ss", duration_format(request.trim_start),
            "-i", str(input_path),
            "-t", duration_format(duration),
            "-c", "copy",
            str(output_path),
        )
        return BuiltCommand(
            argv=argv,
            paths=ResolvedPaths(input_path=input_path, output_path=output_path, work_dir=output_dir),
        )

    def _build_thumbnail(self, request: TranscodeRequest, input_path: Path) -> BuiltCommand:
        output_dir = ensure_directory(self.host.external_cache_dir, "Can't access or make temporary cache directory")
        output_path = output_dir / f"{THUMBNAIL_OUTPUT_PREFIX}{request.output_name}{THUMBNAIL_EXTENSION}"
        return BuiltCommand(
            argv=(),
            paths=ResolvedPaths(input_path=input_path, output_path=output_path, work_dir=output_dir),
        )
