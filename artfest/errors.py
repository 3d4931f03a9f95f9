class ArtFestError(Exception):
    """Base class for errors raised by the festival services."""


class ValidationError(ArtFestError):
    """Input rejected before any store call was made."""


class NotFoundError(ArtFestError):
    """A unit, event or record no longer exists."""
