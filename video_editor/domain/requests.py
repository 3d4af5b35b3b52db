"""
Request model for the operations the bridge exposes.

A `TranscodeRequest` is created once per host call from the loosely typed options
mapping the host passes in, and is immutable afterwards. Option parsing follows
the lenient rules hosts expect: optional values that are missing or of the wrong
type fall back to their defaults, while missing required values are rejected.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from ..config.video import (
    CONTAINER_EXTENSIONS,
    DEFAULT_OUTPUT_NAME_FORMAT,
    QUALITY_DIMENSIONS,
)
from .exceptions import InvalidRange, InvalidRequest


class Operation(Enum):
    """The four operations, valued by the action name the host uses."""

    TRANSCODE = "transcodeVideo"
    TRIM = "trim"
    THUMBNAIL = "createThumbnail"
    RAW_COMMAND = "execFFMPEG"

    @classmethod
    def from_action(cls, action: str) -> Optional["Operation"]:
        for operation in cls:
            if operation.value == action:
                return operation
        return None


class Quality(Enum):
    """Transcode quality tier, valued by the host's numeric code."""

    HIGH = 0
    MEDIUM = 1
    LOW = 2

    @classmethod
    def from_code(cls, code: Any) -> "Quality":
        """Maps a host code to a tier; unknown codes select HIGH."""
        try:
            return cls(_as_int(code))
        except (TypeError, ValueError, OverflowError):
            return cls.HIGH

    @property
    def max_dimension(self) -> int:
        """Cap applied to both the output width and height."""
        return QUALITY_DIMENSIONS[self.name.lower()]


class ContainerFormat(Enum):
    """Output container, valued by the host's numeric code."""

    M4V = 0
    MPEG4 = 1
    M4A = 2
    QUICK_TIME = 3

    @classmethod
    def from_code(cls, code: Any) -> "ContainerFormat":
        """Maps a host code to a container; unknown codes select MPEG4."""
        try:
            return cls(_as_int(code))
        except (TypeError, ValueError, OverflowError):
            return cls.MPEG4

    @property
    def extension(self) -> str:
        return CONTAINER_EXTENSIONS[self.name.lower()]


def default_output_name(now: Optional[datetime] = None) -> str:
    """Timestamp-based output name used when the host does not supply one."""
    return (now or datetime.now()).strftime(DEFAULT_OUTPUT_NAME_FORMAT)


@dataclass(frozen=True)
class TranscodeRequest:
    """
    An immutable, validated request for one operation.

    Attributes:
        operation: Which operation to perform.
        input_locator: The caller's reference to the input file. Empty for
            raw commands, which carry their inputs inside `raw_args`.
        output_name: Base name of the output file, without prefix or extension.
        quality: Transcode quality tier.
        container_format: Transcode output container.
        save_to_library: Write transcodes to the user-visible library folder
            instead of the cache, and announce them to the media scanner.
        delete_input_on_success: Remove the input after a successful transcode.
        duration: Transcode only this many seconds of the input (0 = all).
        trim_start: Trim start, in seconds.
        trim_end: Trim end, in seconds.
        raw_args: ffmpeg arguments for a raw command, used verbatim.
    """

    operation: Operation
    input_locator: str = ""
    output_name: str = ""
    quality: Quality = Quality.HIGH
    container_format: ContainerFormat = ContainerFormat.MPEG4
    save_to_library: bool = True
    delete_input_on_success: bool = False
    duration: float = 0.0
    trim_start: float = 0.0
    trim_end: float = 0.0
    raw_args: tuple[str, ...] = ()

    def __post_init__(self):
        if self.operation is Operation.TRIM:
            if not math.isfinite(self.trim_start) or self.trim_start < 0:
                raise InvalidRange(f"trim: failed to trim video; trimStart ({self.trim_start}) is not a valid position")
            duration = self.trim_duration
            if not math.isfinite(duration) or duration == 0:
                raise InvalidRange("trim: failed to trim video; duration is 0")
            if duration < 0:
                raise InvalidRange(
                    f"trim: failed to trim video; trimEnd ({self.trim_end}) is before trimStart ({self.trim_start})"
                )
        if not self.output_name:
            object.__setattr__(self, "output_name", default_output_name())

    @property
    def trim_duration(self) -> float:
        return self.trim_end - self.trim_start

    @classmethod
    def from_options(cls, operation: Operation, options: Mapping[str, Any]) -> "TranscodeRequest":
        """
        Builds a request from the host's options mapping.

        Args:
            operation: The operation the host invoked.
            options: The options object (keys such as `fileUri`, `quality`,
                `trimStart`, `cmd`).

        Raises:
            InvalidRequest: If `options` is not a mapping or a required option
                is missing or malformed.
            InvalidRange: If a trim request has a zero or negative duration.
        """
        if not isinstance(options, Mapping):
            raise InvalidRequest(f"{operation.value}: options must be an object, got {type(options).__name__}")

        if operation is Operation.RAW_COMMAND:
            cmd = options.get("cmd")
            if not isinstance(cmd, (list, tuple)):
                raise InvalidRequest("execFFMPEG: 'cmd' must be an array of arguments")
            return cls(operation=operation, raw_args=tuple("" if part is None else str(part) for part in cmd))

        file_uri = options.get("fileUri")
        if not isinstance(file_uri, str) or not file_uri:
            raise InvalidRequest(f"{operation.value}: 'fileUri' is required")

        output_name = _opt_str(options, "outputFileName", "")

        if operation is Operation.TRIM:
            return cls(
                operation=operation,
                input_locator=file_uri,
                output_name=output_name,
                trim_start=_opt_float(options, "trimStart", 0.0),
                trim_end=_require_float(options, "trimEnd", operation),
            )

        if operation is Operation.TRANSCODE:
            return cls(
                operation=operation,
                input_locator=file_uri,
                output_name=output_name,
                quality=Quality.from_code(options.get("quality")),
                container_format=ContainerFormat.from_code(options.get("outputFileType")),
                save_to_library=_opt_bool(options, "saveToLibrary", True),
                delete_input_on_success=_opt_bool(options, "deleteInputFile", False),
                duration=max(0.0, _opt_float(options, "duration", 0.0)),
            )

        return cls(operation=operation, input_locator=file_uri, output_name=output_name)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric codes")
    if isinstance(value, str):
        return int(float(value))
    return int(value)


def _opt_str(options: Mapping[str, Any], key: str, default: str) -> str:
    value = options.get(key)
    if value is None:
        return default
    return str(value)


def _opt_bool(options: Mapping[str, Any], key: str, default: bool) -> bool:
    value = options.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return default


def _opt_float(options: Mapping[str, Any], key: str, default: float) -> float:
    value = options.get(key)
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _require_float(options: Mapping[str, Any], key: str, operation: Operation) -> float:
    value = options.get(key)
    if value is None or isinstance(value, bool):
        raise InvalidRequest(f"{operation.value}: '{key}' is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"{operation.value}: '{key}' must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidRequest(f"{operation.value}: '{key}' must be a finite number, got {value!r}")
    return number
