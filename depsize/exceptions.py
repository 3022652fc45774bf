"""Errors raised while preparing or running a measurement."""


class DepsizeError(Exception):
    """Base class for errors that abort a run."""


class SetupError(DepsizeError):
    """Raised when the project is not ready to be measured."""


class ManifestError(DepsizeError):
    """Raised when a package.json cannot be read or parsed."""


class InstallError(DepsizeError):
    """Raised when installing dependencies into the cache directory fails."""


class BaselineError(DepsizeError):
    """Raised when the empty baseline unit fails to bundle."""
