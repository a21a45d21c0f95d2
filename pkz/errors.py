class PkzError(Exception):
    """Base class for PKZ-specific errors."""


class AdapterError(PkzError):
    """Raised by ComicLoader implementations when a source call fails.

    The builder never wraps or retries these; they reach the caller as raised.
    """


# Container related
class ContainerIOError(PkzError):
    pass


class NotFoundError(PkzError):
    pass


# Metadata index
class DecodeError(PkzError):
    pass
