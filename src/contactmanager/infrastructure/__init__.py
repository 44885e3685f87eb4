"""Infrastructure layer: concrete implementations of application ports."""

from contactmanager.infrastructure.broadcast import BroadcastHub, Subscription
from contactmanager.infrastructure.mail import NullAlertSender, SmtpAlertSender, SmtpSettings
from contactmanager.infrastructure.memory_repository import InMemoryContactRepository
from contactmanager.infrastructure.persistence.neo4j_repository import (
    Neo4jContactRepository,
    ensure_contact_constraint,
)

__all__ = [
    "BroadcastHub",
    "InMemoryContactRepository",
    "Neo4jContactRepository",
    "NullAlertSender",
    "SmtpAlertSender",
    "SmtpSettings",
    "Subscription",
    "ensure_contact_constraint",
]
