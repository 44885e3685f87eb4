"""
ContactManager core: clean-architecture layout.

- domain: entities (Contact, EmailAddress, Address). No outer dependencies.
- application: use cases (ContactService), ports (ContactRepository, UpdateNotifier, AlertSender), DTOs.
- infrastructure: adapters (InMemoryContactRepository, Neo4jContactRepository, BroadcastHub, SmtpAlertSender).
"""

from contactmanager.application import (
    ContactDeleted,
    ContactNotFound,
    ContactRepository,
    ContactSaved,
    ContactService,
    ContactSummary,
    EditContactView,
    Invalid,
    PersistenceFailed,
    SaveContactData,
)
from contactmanager.domain import Address, Contact, EmailAddress
from contactmanager.infrastructure import (
    BroadcastHub,
    InMemoryContactRepository,
    Neo4jContactRepository,
    SmtpAlertSender,
)

__all__ = [
    "Address",
    "BroadcastHub",
    "Contact",
    "ContactDeleted",
    "ContactNotFound",
    "ContactRepository",
    "ContactSaved",
    "ContactService",
    "ContactSummary",
    "EditContactView",
    "EmailAddress",
    "InMemoryContactRepository",
    "Invalid",
    "Neo4jContactRepository",
    "PersistenceFailed",
    "SaveContactData",
    "SmtpAlertSender",
]
