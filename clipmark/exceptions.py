"""Custom exceptions for clipmark"""


class ClipmarkError(Exception):
    """
    Base exception for all clipmark errors.

    Attributes:
        message (str): A description of the error.
        module (str): The module where the error originated.
    """
    def __init__(self, message: str, module: str = None):
        self.message = message
        self.module = module or "unknown"
        super().__init__(f"[{self.module}] {self.message}")


class ConfigError(ClipmarkError):
    """Error in configuration/setup"""


class ValidationError(ClipmarkError):
    """
    Base class for export validation errors.

    The message is short enough to be shown on screen as is; ``reason``
    carries it without the module prefix.
    """
    def __init__(self, message: str, module: str = None):
        super().__init__(message, module or "command_builders")

    @property
    def reason(self) -> str:
        return self.message


class MissingMarkError(ValidationError):
    """Start or end mark has not been set"""


class InvalidRangeError(ValidationError):
    """End mark is not after the start mark"""


class UnsupportedEncoderError(ValidationError):
    """
    Raised when a profile names an encoder the command builder does not know.

    Profiles come from configuration, so this is reported at export time
    rather than when the catalog is loaded.
    """
    def __init__(self, encoder: str, module: str = None):
        self.encoder = encoder
        super().__init__(f"Unsupported encoder: {encoder}", module)


class LaunchError(ClipmarkError):
    """The encoder tool could not be located or started"""


class ProcessError(ClipmarkError):
    """Raised when an external tool exits with a non-zero status."""
    def __init__(self, message: str, exit_code: int = 0, output: str = "", module: str = None):
        self.exit_code = exit_code
        self.output = output
        super().__init__(message, module)


class MetadataError(ClipmarkError):
    """Raised when metadata cannot be retrieved or parsed"""
    def __init__(self, message: str, property_name: str = None):
        self.property_name = property_name
        super().__init__(f"Metadata error: {message}", "ffprobe")
