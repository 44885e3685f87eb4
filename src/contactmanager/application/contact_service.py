"""Contact list, edit, save and delete. Notifies clients and alerts the admin on change."""

import logging
import uuid

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
from contactmanager.domain import Address, Contact, EmailAddress, is_transient_id

logger = logging.getLogger(__name__)

UPDATE_EVENT = "Update"


class ContactService:
    """Core flow: save/delete through the repository -> broadcast "Update" -> alert on save."""

    def __init__(
        self,
        repository: ContactRepository,
        notifier: UpdateNotifier,
        alert_sender: AlertSender,
    ) -> None:
        self._repo = repository
        self._notifier = notifier
        self._alert_sender = alert_sender

    def list_contacts(self) -> list[ContactSummary] | PersistenceFailed:
        """Return all contacts with their email addresses, sorted by first name."""
        logger.info("Listing contacts")
        try:
            contacts = sorted(self._repo.list_all(), key=lambda c: c.first_name)
        except PersistenceError as e:
            logger.error("Failed to list contacts: %s", e)
            return PersistenceFailed(reason=str(e) or "Failed to list contacts")
        return [
            ContactSummary(
                contact_id=c.id,
                title=c.title,
                first_name=c.first_name,
                last_name=c.last_name,
                date_of_birth=c.date_of_birth,
                email_addresses=c.email_addresses,
            )
            for c in contacts
        ]

    def get_contact_for_edit(
        self, contact_id: str
    ) -> EditContactView | ContactNotFound | PersistenceFailed:
        logger.info("Loading contact %s for edit", contact_id)
        try:
            contact = None if is_transient_id(contact_id) else self._repo.get_by_id(contact_id)
        except PersistenceError as e:
            logger.error("Failed to load contact %s: %s", contact_id, e)
            return PersistenceFailed(reason=str(e) or "Failed to load contact")
        if contact is None:
            logger.warning("Contact %s not found for edit", contact_id)
            return ContactNotFound(contact_id=contact_id)
        return _edit_view(contact)

    def prepare_new_contact(self) -> EditContactView:
        """Blank edit form: no id, no children."""
        return EditContactView()

    def save_contact(
        self, payload: SaveContactData
    ) -> ContactSaved | ContactNotFound | Invalid | PersistenceFailed:
        """Create or update a contact, replacing all of its email and address children.

        Children are never diffed: whatever the contact had is dropped and the
        payload lists are stored in their place, in one repository transaction.
        Field values are stored exactly as posted.
        """
        is_new = is_transient_id(payload.contact_id)
        if is_new:
            logger.info("Saving new contact")
            contact_id = str(uuid.uuid4())
        else:
            logger.info("Saving contact %s", payload.contact_id)
            try:
                existing = self._repo.get_by_id(payload.contact_id)
            except PersistenceError as e:
                logger.error("Failed to load contact %s: %s", payload.contact_id, e)
                return PersistenceFailed(reason=str(e) or "Failed to load contact")
            if existing is None:
                logger.warning("Contact %s not found for save", payload.contact_id)
                return ContactNotFound(contact_id=payload.contact_id)
            contact_id = existing.id

        invalid = _check_presence(payload)
        if invalid is not None:
            return invalid

        contact = Contact(
            id=contact_id,
            title=payload.title,
            first_name=payload.first_name,
            last_name=payload.last_name,
            date_of_birth=payload.date_of_birth,
            email_addresses=[_email_from_data(e) for e in payload.emails],
            addresses=[_address_from_data(a) for a in payload.addresses],
        )

        try:
            if is_new:
                self._repo.add(contact)
            elif not self._repo.update(contact):
                logger.warning("Contact %s disappeared before update", contact.id)
                return ContactNotFound(contact_id=contact.id)
        except PersistenceError as e:
            logger.error("Failed to save contact %s: %s", contact.id, e)
            return PersistenceFailed(reason=str(e) or "Failed to save contact")

        self._broadcast_update()
        alert_sent = self._send_alert(contact.id)
        return ContactSaved(contact_id=contact.id, alert_sent=alert_sent)

    def delete_contact(self, contact_id: str) -> ContactDeleted | ContactNotFound | PersistenceFailed:
        """Delete a contact and, in the same transaction, all of its children."""
        logger.info("Deleting contact %s", contact_id)
        if is_transient_id(contact_id):
            return ContactNotFound(contact_id=contact_id)
        try:
            deleted = self._repo.delete(contact_id)
        except PersistenceError as e:
            logger.error("Failed to delete contact %s: %s", contact_id, e)
            return PersistenceFailed(reason=str(e) or "Failed to delete contact")
        if not deleted:
            logger.warning("Contact %s not found for delete", contact_id)
            return ContactNotFound(contact_id=contact_id)
        self._broadcast_update()
        return ContactDeleted(contact_id=contact_id)

    def _broadcast_update(self) -> None:
        try:
            reached = self._notifier.publish(UPDATE_EVENT)
        except TransportError as e:
            logger.warning("Failed to broadcast %s: %s", UPDATE_EVENT, e)
            return
        logger.info("Broadcast %s to %d client(s)", UPDATE_EVENT, reached)

    def _send_alert(self, contact_id: str) -> bool:
        """Mail is best-effort: a delivery failure never undoes the committed save."""
        try:
            self._alert_sender.send_contact_updated(contact_id)
        except TransportError as e:
            logger.warning("Failed to send alert for contact %s: %s", contact_id, e)
            return False
        return True


def _check_presence(payload: SaveContactData) -> Invalid | None:
    if not (payload.first_name or "").strip():
        return Invalid(reason="First name is required.")
    for entry in payload.emails:
        if not (entry.email or "").strip():
            return Invalid(reason="Every email entry needs an address.")
    return None


def _email_from_data(data: EmailData) -> EmailAddress:
    return EmailAddress(type=data.type, email=data.email)


def _address_from_data(data: AddressData) -> Address:
    return Address(
        type=data.type,
        street1=data.street1,
        street2=data.street2,
        city=data.city,
        state=data.state,
        zip=data.zip,
    )


def _edit_view(contact: Contact) -> EditContactView:
    return EditContactView(
        contact_id=contact.id,
        title=contact.title,
        first_name=contact.first_name,
        last_name=contact.last_name,
        date_of_birth=contact.date_of_birth,
        email_addresses=contact.email_addresses,
        addresses=contact.addresses,
    )
