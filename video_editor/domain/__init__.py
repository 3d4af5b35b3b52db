"""
This package contains the core domain models of the Video Editor bridge.

The domain layer describes what a request is and what it produces, independently
of how locators are resolved or how ffmpeg is launched.

Modules:
    exceptions.py: The exception hierarchy. Each pipeline stage has its own
                   family, all rooted at `VideoEditorException`.
    requests.py: `TranscodeRequest` and the enums it is built from
                 (`Operation`, `Quality`, `ContainerFormat`).
    models.py: Value objects produced along the way: `ResolvedPaths`,
               `BuiltCommand`, `ProgressEvent`, `ProcessOutcome`.
    plugin_result.py: The per-request response channel (`PluginResult`,
                      `CallbackContext`, `QueueCallbackContext`).
"""
