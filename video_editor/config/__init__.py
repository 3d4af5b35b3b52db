"""
Configuration Package for the Video Editor bridge.

This package centralizes the static configuration of the application so that
paths and encoding parameters can be adjusted without touching the operation
logic.

This package includes settings for:
- User-overridable paths (the FFmpeg directory and the storage/cache roots that
  stand in for the host platform's directories), loaded from `config.user.yaml`.
- Logging format and worker pool sizing.
- The fixed encoding profile for transcodes, the quality and container tables,
  and thumbnail parameters.
"""
