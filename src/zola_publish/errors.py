"""Exception types raised by zola_publish.

Only configuration and enumeration problems abort an operation.  Per-file
failures during a sync batch are contained by the engine and reported in
the ``SyncReport`` instead of being raised.
"""


class PublishError(Exception):
    """Base class for errors that abort a zola_publish operation."""


class ConfigurationError(PublishError, ValueError):
    """A required setting is missing or does not allow the operation."""


class EnumerationError(PublishError):
    """A tree root needed for enumeration does not exist."""
