"""
Video Editor bridge package.

Exposes a small set of video operations (transcode, fast trim, thumbnail
extraction and raw ffmpeg commands) to a host application shell. The media work
itself is done by an external ffmpeg binary; this package resolves input
locators, prepares output directories, builds the ffmpeg argument vectors and
relays the binary's output back to the caller as progress events.

The most common entry point is the dispatcher:

    from video_editor.pipeline.operation_dispatcher import VideoEditor
    from video_editor.domain.plugin_result import QueueCallbackContext

    editor = VideoEditor()
    callback = QueueCallbackContext()
    editor.execute("trim", [{"fileUri": "...", "trimStart": 2, "trimEnd": 7.5}], callback)
    for result in callback.results():
        ...
"""

__version__ = "0.1.0"
