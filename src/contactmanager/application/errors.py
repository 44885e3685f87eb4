"""Exceptions raised by infrastructure adapters across the application ports."""


class PersistenceError(Exception):
    """The store could not commit a unit of work. Nothing was applied."""


class TransportError(Exception):
    """A notification or mail could not be delivered."""
