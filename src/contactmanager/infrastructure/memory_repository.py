"""In-memory implementation of ContactRepository (no DB)."""

from contactmanager.domain import Contact


class InMemoryContactRepository:
    """Stores contacts in memory. Order preserved by insertion.
    Contacts are immutable, so replacing the stored aggregate replaces its children
    atomically; deleting it drops them with it.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Contact] = {}
        self._order: list[str] = []

    def add(self, contact: Contact) -> None:
        if contact.id in self._by_id:
            return
        self._by_id[contact.id] = contact
        self._order.append(contact.id)

    def update(self, contact: Contact) -> bool:
        if contact.id not in self._by_id:
            return False
        self._by_id[contact.id] = contact
        return True

    def delete(self, contact_id: str) -> bool:
        if self._by_id.pop(contact_id, None) is None:
            return False
        self._order.remove(contact_id)
        return True

    def get_by_id(self, contact_id: str) -> Contact | None:
        return self._by_id.get(contact_id)

    def list_all(self) -> list[Contact]:
        return [self._by_id[cid] for cid in self._order if cid in self._by_id]
