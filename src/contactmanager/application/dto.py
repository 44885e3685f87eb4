"""Input payloads, view projections and tagged results of the contact use cases."""

from dataclasses import dataclass, field
from datetime import date

from contactmanager.domain import Address, EmailAddress


@dataclass(frozen=True)
class EmailData:
    type: str = ""
    email: str = ""


@dataclass(frozen=True)
class AddressData:
    type: str = ""
    street1: str = ""
    street2: str | None = None
    city: str = ""
    state: str = ""
    zip: str = ""


@dataclass(frozen=True)
class SaveContactData:
    """Save payload. An empty (or nil) contact_id creates a new contact.
    emails and addresses are the complete replacement child lists.
    """

    contact_id: str | None = None
    title: str = ""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: date | None = None
    emails: list[EmailData] = field(default_factory=list)
    addresses: list[AddressData] = field(default_factory=list)


@dataclass(frozen=True)
class ContactSummary:
    """One row of the contact table."""

    contact_id: str
    title: str
    first_name: str
    last_name: str
    date_of_birth: date | None
    email_addresses: tuple[EmailAddress, ...] = ()


@dataclass(frozen=True)
class EditContactView:
    """Edit-form projection of a contact. contact_id is empty for a new contact."""

    contact_id: str = ""
    title: str = ""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: date | None = None
    email_addresses: tuple[EmailAddress, ...] = ()
    addresses: tuple[Address, ...] = ()

    @property
    def is_new(self) -> bool:
        return not self.contact_id


@dataclass(frozen=True)
class ContactSaved:
    contact_id: str
    alert_sent: bool = True


@dataclass(frozen=True)
class ContactDeleted:
    contact_id: str


@dataclass(frozen=True)
class ContactNotFound:
    contact_id: str


@dataclass(frozen=True)
class Invalid:
    reason: str


@dataclass(frozen=True)
class PersistenceFailed:
    reason: str
