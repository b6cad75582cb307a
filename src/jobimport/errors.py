"""Exceptions raised by jobimport."""


class JobImportError(Exception):
    """Base class for all jobimport failures."""


class DuplicateNameError(JobImportError):
    """A local item already occupies the import destination."""

    def __init__(self, path: str):
        super().__init__(f"An item named '{path}' already exists")
        self.path = path


class TransportError(JobImportError):
    """Fetching an item listing or a config.xml from the remote server failed."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class DiscoveryError(TransportError):
    """Expanding one remote sub-folder failed during a recursive query."""


class PersistenceError(JobImportError):
    """Creating, updating or saving a local item failed."""


class ConfigError(JobImportError):
    """Configuration is missing or malformed."""
