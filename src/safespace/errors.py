"""
Error taxonomy for the detection pipeline.

Only ConfigurationError is allowed to disable detection wholesale. The
recoverable errors are caught at component boundaries and handed back to
callers inside result objects rather than raised.
"""


class SafeSpaceError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(SafeSpaceError):
    """Model artifact missing or corrupt. Fatal to the detection feature."""


class ConfigValidationError(SafeSpaceError):
    """Raised when a config file cannot be parsed or fails validation."""


class InputError(SafeSpaceError):
    """Image could not be decoded or has an unsupported format."""


class InferenceError(SafeSpaceError):
    """Detector backend failed during a call."""


class RenderError(SafeSpaceError):
    """Overlay compositing failed."""
