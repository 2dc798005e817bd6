"""
Exceptions raised by mcdev.

Every error names the coordinate, path or version it is about, so that a failed
build can be traced back to its cause without a debugger.
"""


class McdevError(Exception):
    """Base exception for all mcdev errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(McdevError):
    """Raised for missing or invalid configuration, including absent cache files."""
    pass


class OfflineError(ConfigurationError):
    """Raised when something would need the network while running offline."""
    pass


# --- Resolution Errors ---

class ResolutionError(McdevError):
    """Raised when an artifact can't be located or fetched."""
    pass


class ArtifactNotFoundError(ResolutionError):
    def __init__(self, coordinate, sources):
        self.coordinate = coordinate
        self.sources = list(sources)
        super().__init__(
            "Artifact %s not found in any of %d repositories: %s"
            % (coordinate, len(self.sources), ", ".join(self.sources) or "<none>")
        )


# --- Transformation Errors ---

class DeobfuscationError(McdevError):
    """Raised when a pipeline function fails."""

    def __init__(self, message, function=None, path=None):
        self.function = function
        self.path = path
        context = []
        if function:
            context.append(f"function {function}")
        if path:
            context.append(f"file {path}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class InstallationError(McdevError):
    """Raised when a Minecraft version could not be installed."""

    def __init__(self, version, cause=None):
        self.version = version
        message = f"Failed to install minecraft version {version}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


# --- Consistency Errors ---

class ConsistencyError(McdevError):
    """Raised when a required earlier step was evidently skipped."""
    pass
