"""
Command-Line Interface (CLI) for the Video Editor bridge.

This module uses Python's `argparse` to expose the four bridge actions as
subcommands, so the same code path the host application uses can be driven from
a terminal:

    video-editor transcode clip.mov --quality medium --format mpeg4
    video-editor trim clip.mp4 --start 2 --end 7.5
    video-editor thumbnail clip.mp4
    video-editor exec -- -i clip.mp4 -vn audio.m4a
"""
import argparse
import sys
from typing import Optional, Sequence

from loguru import logger

from .config.common import LOGGER_FORMAT, MAX_WORKERS
from .domain.plugin_result import QueueCallbackContext, Status
from .domain.requests import ContainerFormat, Operation, Quality
from .pipeline.operation_dispatcher import VideoEditor
from .services.host_environment import HostEnvironment
from .utils.ffmpeg_utils import verify_ffmpeg


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the Video Editor bridge.

    Returns:
        argparse.Namespace: The parsed arguments. `command` holds the subcommand.
    """
    parser = argparse.ArgumentParser(description="Transcode, trim and thumbnail videos with FFmpeg.")
    parser.add_argument(
        "--log-level", type=str, default="INFO", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level. TRACE also shows every ffmpeg output line."
    )
    parser.add_argument(
        "--workers", type=int, default=MAX_WORKERS, help="Number of worker threads."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transcode = subparsers.add_parser("transcode", help="Re-encode a video to H.264 at a bounded resolution.")
    transcode.add_argument("file_uri", help="Path, file: URI or content: reference of the input video.")
    transcode.add_argument("--output-name", default=None, help="Base name of the output (default: timestamp).")
    transcode.add_argument(
        "--quality", default="high", choices=[q.name.lower() for q in Quality],
        help="Quality tier; caps the output at 640, 480 or 320 pixels."
    )
    transcode.add_argument(
        "--format", dest="container", default="mpeg4", choices=[c.name.lower() for c in ContainerFormat],
        help="Output container."
    )
    transcode.add_argument(
        "--no-library", action="store_true", help="Write to the cache instead of the Movies library folder."
    )
    transcode.add_argument(
        "--delete-input", action="store_true", help="Delete the input file after a successful transcode."
    )
    transcode.add_argument(
        "--duration", type=float, default=0.0, help="Only transcode this many seconds (0 = whole video)."
    )

    trim = subparsers.add_parser("trim", help="Cut a section of a video without re-encoding.")
    trim.add_argument("file_uri", help="Path, file: URI or content: reference of the input video.")
    trim.add_argument("--start", type=float, default=0.0, help="Start of the section, in seconds.")
    trim.add_argument("--end", type=float, required=True, help="End of the section, in seconds.")
    trim.add_argument("--output-name", default=None, help="Base name of the output (default: timestamp).")

    thumbnail = subparsers.add_parser("thumbnail", help="Save a JPEG thumbnail of a video.")
    thumbnail.add_argument("file_uri", help="Path, file: URI or content: reference of the input video.")
    thumbnail.add_argument("--output-name", default=None, help="Base name of the output (default: timestamp).")

    exec_parser = subparsers.add_parser("exec", help="Run ffmpeg with the given arguments verbatim.")
    exec_parser.add_argument("ffmpeg_args", nargs=argparse.REMAINDER, help="Arguments passed to ffmpeg.")

    args = parser.parse_args(argv)
    if args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.command == "exec":
        if args.ffmpeg_args and args.ffmpeg_args[0] == "--":
            args.ffmpeg_args = args.ffmpeg_args[1:]
        if not args.ffmpeg_args:
            parser.error("exec: no ffmpeg arguments given")
    return args


def build_action(args: argparse.Namespace) -> tuple[str, dict]:
    """
    Translates parsed arguments into the action name and options object a host
    would send.
    """
    if args.command == "exec":
        return Operation.RAW_COMMAND.value, {"cmd": list(args.ffmpeg_args)}

    options = {"fileUri": args.file_uri}
    if args.output_name:
        options["outputFileName"] = args.output_name

    if args.command == "transcode":
        options.update(
            quality=Quality[args.quality.upper()].value,
            outputFileType=ContainerFormat[args.container.upper()].value,
            saveToLibrary=not args.no_library,
            deleteInputFile=args.delete_input,
            duration=args.duration,
        )
        return Operation.TRANSCODE.value, options
    if args.command == "trim":
        options.update(trimStart=args.start, trimEnd=args.end)
        return Operation.TRIM.value, options
    return Operation.THUMBNAIL.value, options


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Runs one bridge action from the command line.

    1. Parses arguments and configures the logger.
    2. Verifies that FFmpeg can be executed.
    3. Submits the action and logs every progress line as it arrives.
    4. Prints the result (an output path, if any) to stdout.

    Returns:
        0 on success, 1 if the action failed.
    """
    args = get_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    host = HostEnvironment()
    if not verify_ffmpeg(host.ffmpeg_binary):
        return 1

    action, options = build_action(args)
    callback = QueueCallbackContext(request_id=f"cli-{action}")

    with VideoEditor(host=host, max_workers=args.workers) as editor:
        editor.execute(action, [options], callback)
        for result in callback.results():
            if not result.is_terminal:
                logger.info(result.message["progress"])
                continue
            if result.status is Status.ERROR:
                logger.error(f"{action} failed: {result.message}")
                return 1
            if result.message:
                print(result.message)
            logger.success(f"{action} finished.")
    return 0
