"""Error taxonomy shared by the store, remote sources and reconciler."""


class RunebookError(Exception):
    """Base class for all runebook errors."""


class StorageUnavailable(RunebookError):
    """The storage engine could not be opened."""


class NotConnected(RunebookError):
    """A store operation was attempted before connect() succeeded."""


class PersistenceError(RunebookError):
    """A read, write or transaction failed at the engine level."""


class RemoteUnavailable(RunebookError):
    """The version descriptor or dataset could not be fetched or parsed."""


class ValidationError(RunebookError, ValueError):
    """A user-submitted item is missing required fields."""
