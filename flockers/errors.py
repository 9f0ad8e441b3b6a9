"""Flockers-specific exception hierarchy."""

import flockers


class FlockersError(Exception):
    """Base class for all Flockers-specific exceptions.

    It automatically prepends the Flockers version to help with debugging reports.
    """

    def __init__(self, message: str):
        self.flockers_version = getattr(flockers, "__version__", "unknown")
        # Store the original message cleanly for programmatic access
        self.original_message = message
        full_message = f"[Flockers {self.flockers_version}] {message}"
        super().__init__(full_message)


class ConfigurationError(FlockersError):
    """Raised when flock parameters are invalid or missing."""

    def __init__(self, param_name: str | None = None, reason: str | None = None):
        # Allow flexible usage: raise ConfigurationError("Generic message")
        # OR: raise ConfigurationError("max_speed", "must be positive")
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid configuration"
            self.param_name = None

        super().__init__(message)


class DimensionError(FlockersError):
    """Raised when the simulation domain has invalid dimensions.

    Examples: zero or negative width/height.
    """

    def __init__(self, width, height):
        self.width = width
        self.height = height
        message = f"Domain dimensions must be positive, got width={width}, height={height}."
        super().__init__(message)
