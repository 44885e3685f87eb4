"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

from contactmanager.application.contact_service import UPDATE_EVENT, ContactService
from contactmanager.application.dto import (
    AddressData,
    ContactDeleted,
    ContactNotFound,
    ContactSaved,
    ContactSummary,
    EditContactView,
    EmailData,
    Invalid,
    PersistenceFailed,
    SaveContactData,
)
from contactmanager.application.errors import PersistenceError, TransportError
from contactmanager.application.ports import AlertSender, ContactRepository, UpdateNotifier

__all__ = [
    "UPDATE_EVENT",
    "AddressData",
    "AlertSender",
    "ContactDeleted",
    "ContactNotFound",
    "ContactRepository",
    "ContactSaved",
    "ContactService",
    "ContactSummary",
    "EditContactView",
    "EmailData",
    "Invalid",
    "PersistenceError",
    "PersistenceFailed",
    "SaveContactData",
    "TransportError",
    "UpdateNotifier",
]
