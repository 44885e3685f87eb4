"""Domain entities: Contact and its owned EmailAddress / Address children."""

import uuid
from dataclasses import dataclass, field
from datetime import date

# Id posted by the edit form for a contact that has never been saved.
NIL_CONTACT_ID = "00000000-0000-0000-0000-000000000000"


def is_transient_id(contact_id: str | None) -> bool:
    """True when the id denotes a contact that does not exist in the store yet."""
    value = (contact_id or "").strip()
    return not value or value == NIL_CONTACT_ID


@dataclass(frozen=True)
class EmailAddress:
    """An email address owned by exactly one Contact."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    type: str = ""
    email: str = ""


@dataclass(frozen=True)
class Address:
    """A postal address owned by exactly one Contact."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    type: str = ""
    street1: str = ""
    street2: str | None = None
    city: str = ""
    state: str = ""
    zip: str = ""


@dataclass(frozen=True)
class Contact:
    """
    Represents a person in the address book.
    Children are composed: they are replaced with the contact on every save
    and removed with it on delete.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = ""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: date | None = None
    email_addresses: tuple[EmailAddress, ...] = ()
    addresses: tuple[Address, ...] = ()

    def __post_init__(self):
        if is_transient_id(self.id):
            raise ValueError("Contact id must be a non-empty, non-nil identifier.")
        # Accept lists from callers but store immutable tuples.
        object.__setattr__(self, "email_addresses", tuple(self.email_addresses))
        object.__setattr__(self, "addresses", tuple(self.addresses))
