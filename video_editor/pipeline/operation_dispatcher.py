"""
Entry point for host calls.

`VideoEditor.execute` is what the host invokes with an action name, its argument
array and a `CallbackContext`. Options are validated on the calling thread; the
accepted request then runs on a worker thread through the stages

    received -> resolving -> building -> running -> succeeded | failed

and reports progress lines and one terminal result through the context.
"""
import concurrent.futures
import itertools
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from ..config.common import (
    MAX_WORKERS,
    REQUEST_STATE_BUILDING,
    REQUEST_STATE_FAILED,
    REQUEST_STATE_RECEIVED,
    REQUEST_STATE_RESOLVING,
    REQUEST_STATE_RUNNING,
    REQUEST_STATE_SUCCEEDED,
)
from ..domain.exceptions import ProcessFailed, VideoEditorException
from ..domain.models import BuiltCommand, ProgressEvent
from ..domain.plugin_result import CallbackContext, PluginResult
from ..domain.requests import Operation, TranscodeRequest
from ..services.command_builder import CommandBuilder
from ..services.host_environment import HostEnvironment
from ..services.path_resolver import PathResolver
from ..services.process_runner import ProcessRunner
from ..services.thumbnail_service import save_jpeg_thumbnail
from ..utils.format_utils import format_timedelta, formatted_size

OperationHandler = Callable[[TranscodeRequest, BuiltCommand, CallbackContext], Optional[str]]


def error_message(exc: BaseException) -> str:
    """The text reported to the host for a failed request."""
    if isinstance(exc, VideoEditorException):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


class VideoEditor:
    """
    Routes host actions to the services and runs them on a thread pool.

    Args:
        host: Platform collaborators and directories. Defaults to one built from
            the user configuration.
        executor: Pool to run requests on. If omitted, an owned
            ThreadPoolExecutor with `max_workers` threads is created.
        max_workers: Size of the owned pool.
    """

    def __init__(
        self,
        host: Optional[HostEnvironment] = None,
        executor: Optional[concurrent.futures.Executor] = None,
        max_workers: int = MAX_WORKERS,
    ):
        self.host = host or HostEnvironment()
        self._owns_executor = executor is None
        self.executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="video-editor"
        )
        self.path_resolver = PathResolver(self.host.content_resolver, self.host.external_storage_dir)
        self.command_builder = CommandBuilder(self.host)
        self.process_runner = ProcessRunner()
        self._request_ids = itertools.count(1)
        self._handlers: dict[Operation, OperationHandler] = {
            Operation.TRANSCODE: self._run_transcode,
            Operation.TRIM: self._run_trim,
            Operation.THUMBNAIL: self._run_thumbnail,
            Operation.RAW_COMMAND: self._run_raw_command,
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)

    def execute(self, action: str, args: Any, callback: CallbackContext) -> bool:
        """
        Starts `action` for the host.

        Args:
            action: One of "transcodeVideo", "trim", "createThumbnail", "execFFMPEG".
            args: The host's argument array; its first element is the options object.
            callback: Receives progress results and the terminal result.

        Returns:
            False if the action is unknown (nothing is sent to `callback`),
            True otherwise.
        """
        operation = Operation.from_action(action)
        if operation is None:
            logger.warning(f"Unknown action '{action}'")
            return False

        request_id = callback.request_id or f"{action}-{next(self._request_ids)}"
        if isinstance(args, (list, tuple)):
            options = args[0] if args else None
        else:
            options = args

        try:
            request = TranscodeRequest.from_options(operation, options)
        except VideoEditorException as e:
            logger.error(f"[{request_id}] Rejected {action}: {e}")
            callback.error(error_message(e))
            return True
        except Exception as e:
            logger.error(f"[{request_id}] Rejected {action} with unexpected {type(e).__name__}: {e}")
            callback.error(error_message(e))
            return True

        logger.debug(f"[{request_id}] {REQUEST_STATE_RECEIVED}: {request}")
        self.executor.submit(self._process_request, request_id, request, callback)
        return True

    def shutdown(self, wait: bool = True):
        """Stops the owned worker pool. A pool passed in by the caller is left alone."""
        if self._owns_executor:
            self.executor.shutdown(wait=wait)

    def _process_request(self, request_id: str, request: TranscodeRequest, callback: CallbackContext):
        start_time = datetime.now()
        try:
            logger.debug(f"[{request_id}] {REQUEST_STATE_RESOLVING}")
            input_path = None
            if request.operation is not Operation.RAW_COMMAND:
                input_path = self.path_resolver.resolve(request.input_locator)

            logger.debug(f"[{request_id}] {REQUEST_STATE_BUILDING}")
            built = self.command_builder.build(request, input_path)

            logger.debug(f"[{request_id}] {REQUEST_STATE_RUNNING}")
            result = self._handlers[request.operation](request, built, callback)
            self._log_success(request_id, result, start_time)
        except VideoEditorException as e:
            logger.error(f"[{request_id}] {REQUEST_STATE_FAILED}: {e}")
            callback.error(error_message(e))
            return
        except Exception as e:
            logger.error(
                f"[{request_id}] {REQUEST_STATE_FAILED} with unexpected {type(e).__name__}: {e}\n"
                f"{''.join(traceback.format_exception(e))}"
            )
            callback.error(error_message(e))
            return

        callback.success(result)

    @staticmethod
    def _log_success(request_id: str, result: Optional[str], start_time: datetime):
        elapsed = format_timedelta(datetime.now() - start_time)
        if result:
            size = formatted_size(Path(result).stat().st_size)
            logger.success(f"[{request_id}] {REQUEST_STATE_SUCCEEDED}: {result} ({size}, took {elapsed})")
        else:
            logger.success(f"[{request_id}] {REQUEST_STATE_SUCCEEDED} (took {elapsed})")

    def _run_ffmpeg(self, built: BuiltCommand, callback: CallbackContext, expected_output: Optional[Path] = None):
        def send_progress(event: ProgressEvent):
            callback.send_plugin_result(PluginResult.progress(event.raw_line))

        return self.process_runner.run(built.argv, send_progress, expected_output)

    def _run_transcode(self, request: TranscodeRequest, built: BuiltCommand, callback: CallbackContext) -> str:
        outcome = self._run_ffmpeg(built, callback, built.output_path)
        if not outcome.succeeded:
            logger.error(
                f"Transcode failed: exit code {outcome.exit_code}, output present: {outcome.output_file_exists}"
            )
            raise ProcessFailed("an error ocurred during transcoding")

        output_path = built.output_path
        if request.save_to_library:
            self.host.media_scanner.scan_file(output_path)
        if request.delete_input_on_success:
            self._delete_input(built.paths.input_path)
        return str(output_path)

    def _run_trim(self, request: TranscodeRequest, built: BuiltCommand, callback: CallbackContext) -> str:
        outcome = self._run_ffmpeg(built, callback, built.output_path)
        if not outcome.succeeded:
            logger.error(f"Trim failed: exit code {outcome.exit_code}, output present: {outcome.output_file_exists}")
            raise ProcessFailed("trim: failed to trim video")
        return str(built.output_path)

    def _run_thumbnail(self, request: TranscodeRequest, built: BuiltCommand, callback: CallbackContext) -> str:
        image = self.host.thumbnail_generator.create_video_thumbnail(built.paths.input_path)
        save_jpeg_thumbnail(image, built.output_path)
        return str(built.output_path)

    def _run_raw_command(self, request: TranscodeRequest, built: BuiltCommand, callback: CallbackContext) -> None:
        outcome = self._run_ffmpeg(built, callback)
        if outcome.exit_code != 0:
            raise ProcessFailed(f"ffmpeg exited with code {outcome.exit_code}")
        return None

    @staticmethod
    def _delete_input(input_path: Path):
        try:
            input_path.unlink()
            logger.info(f"Deleted input file: {input_path}")
        except OSError as e:
            logger.warning(f"Could not delete input file {input_path}: {e}")
