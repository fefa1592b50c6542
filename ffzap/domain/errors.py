"""Exception hierarchy for ffzap.

Per-item errors (``OutputPathError``, ``ToolLaunchError``) are caught by the
worker loop and turned into failure-list entries. ``ConfigError`` and
``FileListError`` are raised before any worker starts and stop the run.
"""


class FfzapError(Exception):
    """Base class for all ffzap errors."""


class ConfigError(FfzapError):
    """Invalid or missing configuration detected before processing starts."""


class FileListError(ConfigError):
    """The file list passed with --file-list could not be read."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(message)


class OutputPathError(FfzapError):
    """The output pattern cannot be resolved for an input path."""


class ToolLaunchError(FfzapError):
    """The external transcoding tool could not be started at all."""

    def __init__(self, binary: str, cause: OSError):
        self.binary = binary
        self.cause = cause
        super().__init__(f"Could not launch {binary}: {cause}")
