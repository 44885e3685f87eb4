"""Domain layer: entities and value objects. No dependencies on outer layers."""

from contactmanager.domain.entities import (
    NIL_CONTACT_ID,
    Address,
    Contact,
    EmailAddress,
    is_transient_id,
)

__all__ = ["NIL_CONTACT_ID", "Address", "Contact", "EmailAddress", "is_transient_id"]
