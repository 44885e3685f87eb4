"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from contactmanager.domain import Contact


class ContactRepository(Protocol):
    """Persists and queries contact aggregates (Contact + email and address children).

    add, update and delete are each one atomic unit of work: either every
    change is visible to later reads or none is. Implementations raise
    PersistenceError when the commit fails.
    """

    def add(self, contact: Contact) -> None:
        """Insert a new contact together with all of its children."""
        ...

    def update(self, contact: Contact) -> bool:
        """Overwrite scalars and replace all children. Returns False if not found."""
        ...

    def delete(self, contact_id: str) -> bool:
        """Remove the contact and cascade to its children. Returns False if not found."""
        ...

    def get_by_id(self, contact_id: str) -> Contact | None:
        """Return the contact with children loaded, or None."""
        ...

    def list_all(self) -> list[Contact]:
        """Return all contacts with children loaded, in any stable order."""
        ...


class UpdateNotifier(Protocol):
    """Fan-out of change events to every connected client."""

    def publish(self, event: str) -> int:
        """Send event to all subscribers. Returns how many were reached."""
        ...


class AlertSender(Protocol):
    """Sends the administrative alert for a changed contact."""

    def send_contact_updated(self, contact_id: str) -> None:
        """Deliver the alert. Raises TransportError on failure."""
        ...
