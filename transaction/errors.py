"""Exceptions raised while deriving and signing transaction ids."""


class TransactionError(Exception):
    """Base class for every transaction subsystem error."""
    pass


class ParseError(TransactionError):
    """Raised when no element can be recognized in the markup."""
    pass


class DerivationError(TransactionError):
    """Raised when the document does not carry the material a session needs."""
    pass


class MissingKeyError(DerivationError):
    """Raised when the site verification key is absent."""
    pass


class IndicesNotFoundError(DerivationError):
    """Raised when no key byte indices could be read from the on-demand script."""
    pass


class InvalidFrameError(DerivationError):
    """Raised when an animation frame is too short to animate."""
    pass


class FrameIndexError(DerivationError, IndexError):
    """Raised when the document has no animation frames to pick from."""
    pass


class InterpolationError(TransactionError, ValueError):
    """Raised for mismatched or mixed interpolation inputs."""
    pass


class NotInitializedError(TransactionError):
    """Raised when a token is requested before any session exists."""
    pass
