"""
Defines custom exception types for the Video Editor bridge.

Each stage of a request raises its own family of exceptions, so the dispatcher
can report a precise message to the caller while still catching everything at a
single boundary. The message of an exception is what the caller receives in the
terminal error result.

All custom exceptions inherit from the base `VideoEditorException`.
"""


class VideoEditorException(Exception):
    """Base class for all custom exceptions in the Video Editor bridge."""

    pass


class InvalidRequest(VideoEditorException):
    """
    Raised when the options supplied by the host cannot be turned into a request.

    Typical causes are a missing required key (e.g. `fileUri` or `trimEnd`) or a
    value of the wrong type (a non-numeric trim point).
    """

    pass


# --- Locator Resolution Exceptions ---
class LocatorException(VideoEditorException):
    """Base class for exceptions raised while resolving an input locator."""

    pass


class InputNotFound(LocatorException):
    """Raised when no file exists at the location a locator resolves to."""

    pass


class InputUnreadable(LocatorException):
    """Raised when the resolved input file exists but cannot be opened for reading."""

    pass


class InvalidLocator(LocatorException):
    """
    Raised when a locator cannot be decoded or interpreted.

    This covers malformed percent-escapes, unsupported URI schemes, file URIs
    pointing at a remote host, and content references the content resolver
    cannot map to a path.
    """

    pass


# --- Command Building Exceptions ---
class CommandBuildException(VideoEditorException):
    """Base class for exceptions raised while preparing an ffmpeg command."""

    pass


class DirectoryUnavailable(CommandBuildException):
    """Raised when an output or temporary directory cannot be created."""

    pass


class InvalidRange(CommandBuildException):
    """Raised when a trim request describes an empty or negative time range."""

    pass


# --- Process Execution Exceptions ---
class ProcessException(VideoEditorException):
    """Base class for exceptions related to running the external binary."""

    pass


class LaunchFailed(ProcessException):
    """Raised when the external binary cannot be located or started."""

    pass


class ProcessFailed(ProcessException):
    """
    Raised when the external binary ran but the operation did not succeed.

    A clean exit code alone is not enough: if the expected output file is missing
    afterwards the request is still a failure.
    """

    pass
