"""
Response channel between a running request and the host that started it.

Every request gets its own `CallbackContext`. Workers push `PluginResult`s into
it: any number of non-terminal results (progress, flagged `keep_callback`), then
exactly one terminal result (success or error). Once the terminal result has been
sent the context is finished and anything sent afterwards is dropped.

`QueueCallbackContext` is the channel form of the same contract: results are
placed on a bounded queue in the order they were produced, and the consumer
iterates them with `results()`.
"""
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from loguru import logger

from ..config.common import CALLBACK_QUEUE_SIZE


class Status(Enum):
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class PluginResult:
    """
    A single message for the host.

    Attributes:
        status: Whether the message reports success or failure.
        message: The payload: an output path, a progress object, an error
            message, or None.
        keep_callback: True for non-terminal messages. The host keeps listening
            for more results on the same request.
    """

    status: Status
    message: Any = None
    keep_callback: bool = False

    @property
    def is_terminal(self) -> bool:
        return not self.keep_callback

    @classmethod
    def progress(cls, line: str) -> "PluginResult":
        return cls(Status.OK, {"progress": line}, keep_callback=True)


class CallbackContext:
    """
    Thread-safe per-request sender of PluginResults.

    Args:
        on_result: Receives each result, in order, on the sending thread.
        request_id: Label used in log messages.
    """

    def __init__(self, on_result: Callable[[PluginResult], None], request_id: str = ""):
        self._on_result = on_result
        self._lock = threading.Lock()
        self._finished = False
        self.request_id = request_id

    @property
    def is_finished(self) -> bool:
        return self._finished

    def send_plugin_result(self, result: PluginResult) -> bool:
        """
        Delivers a result unless the context is already finished.

        Returns:
            True if the result was delivered, False if it was dropped.
        """
        with self._lock:
            if self._finished:
                logger.warning(
                    f"[{self.request_id}] Dropping result sent after completion: {result.status.value} {result.message!r}"
                )
                return False
            if result.is_terminal:
                self._finished = True
            self._on_result(result)
            return True

    def success(self, message: Any = None) -> bool:
        return self.send_plugin_result(PluginResult(Status.OK, message))

    def error(self, message: Any) -> bool:
        return self.send_plugin_result(PluginResult(Status.ERROR, message))


class QueueCallbackContext(CallbackContext):
    """
    A CallbackContext backed by a bounded FIFO queue.

    Producers block when `maxsize` results are pending, which keeps a fast
    ffmpeg from buffering unbounded output for a slow consumer.
    """

    def __init__(self, request_id: str = "", maxsize: int = CALLBACK_QUEUE_SIZE):
        self._queue: "queue.Queue[PluginResult]" = queue.Queue(maxsize=maxsize)
        super().__init__(self._queue.put, request_id=request_id)

    def results(self, timeout: Optional[float] = None) -> Iterator[PluginResult]:
        """
        Yields results in production order, ending after the terminal one.

        Args:
            timeout: Maximum seconds to wait for each result. None waits forever.

        Raises:
            queue.Empty: If `timeout` elapses before the next result arrives.
        """
        while True:
            result = self._queue.get(timeout=timeout)
            yield result
            if result.is_terminal:
                return

    def wait_for_result(self, timeout: Optional[float] = None) -> PluginResult:
        """Drains progress results and returns the terminal one."""
        terminal = None
        for terminal in self.results(timeout=timeout):
            pass
        return terminal
