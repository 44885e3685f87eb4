"""Neo4j implementation of ContactRepository.
Graph: (c:Contact)-[:HAS_EMAIL]->(:EmailAddress), (c)-[:HAS_ADDRESS]->(:Address).
Children exist only through their contact: every write that touches a contact
detaches and deletes its children inside the same write transaction.
"""

from datetime import date

from neo4j.exceptions import DriverError, Neo4jError

from contactmanager.application.errors import PersistenceError
from contactmanager.domain import Address, Contact, EmailAddress

_CONSTRAINT_QUERY = """
CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
FOR (c:Contact) REQUIRE c.id IS UNIQUE
"""

_CREATE_CONTACT_QUERY = """
CREATE (c:Contact {
    id: $id,
    title: $title,
    first_name: $first_name,
    last_name: $last_name,
    date_of_birth: $date_of_birth
})
RETURN c.id AS id
"""

_UPDATE_CONTACT_QUERY = """
MATCH (c:Contact {id: $id})
SET c.title = $title,
    c.first_name = $first_name,
    c.last_name = $last_name,
    c.date_of_birth = $date_of_birth
RETURN c.id AS id
"""

_DELETE_CHILDREN_QUERY = """
MATCH (c:Contact {id: $id})
OPTIONAL MATCH (c)-[:HAS_EMAIL|HAS_ADDRESS]->(child)
WITH collect(child) AS children
FOREACH (n IN children | DETACH DELETE n)
"""

_CREATE_CHILDREN_QUERY = """
MATCH (c:Contact {id: $id})
FOREACH (e IN $emails |
    CREATE (c)-[:HAS_EMAIL]->(:EmailAddress {id: e.id, position: e.position, type: e.type, email: e.email}))
FOREACH (a IN $addresses |
    CREATE (c)-[:HAS_ADDRESS]->(:Address {
        id: a.id, position: a.position, type: a.type, street1: a.street1, street2: a.street2,
        city: a.city, state: a.state, zip: a.zip
    }))
"""

_DELETE_CONTACT_QUERY = """
MATCH (c:Contact {id: $id})
OPTIONAL MATCH (c)-[:HAS_EMAIL|HAS_ADDRESS]->(child)
WITH c, collect(child) AS children
FOREACH (n IN children | DETACH DELETE n)
DETACH DELETE c
RETURN 1 AS deleted
"""

_MATCH_WITH_CHILDREN = """
OPTIONAL MATCH (c)-[:HAS_EMAIL]->(e:EmailAddress)
WITH c, e ORDER BY e.position
WITH c, collect(e {.*}) AS emails
OPTIONAL MATCH (c)-[:HAS_ADDRESS]->(a:Address)
WITH c, emails, a ORDER BY a.position
RETURN c {.*} AS contact, emails, collect(a {.*}) AS addresses
"""

_GET_CONTACT_QUERY = "MATCH (c:Contact {id: $id})\n" + _MATCH_WITH_CHILDREN

_LIST_CONTACTS_QUERY = (
    "MATCH (c:Contact)\n" + _MATCH_WITH_CHILDREN + "ORDER BY contact.first_name, contact.id\n"
)


def ensure_contact_constraint(driver) -> None:
    """Create unique constraint on Contact(id) if missing."""
    with driver.session() as session:
        session.run(_CONSTRAINT_QUERY)


def _date_to_iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _iso_to_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


class Neo4jContactRepository:
    """Stores contact aggregates in Neo4j. Each write is one execute_write transaction."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def add(self, contact: Contact) -> None:
        def work(tx):
            tx.run(_CREATE_CONTACT_QUERY, **_contact_params(contact)).consume()
            tx.run(_CREATE_CHILDREN_QUERY, **_children_params(contact)).consume()

        self._write(work)

    def update(self, contact: Contact) -> bool:
        def work(tx):
            record = tx.run(_UPDATE_CONTACT_QUERY, **_contact_params(contact)).single()
            if record is None:
                return False
            tx.run(_DELETE_CHILDREN_QUERY, id=contact.id).consume()
            tx.run(_CREATE_CHILDREN_QUERY, **_children_params(contact)).consume()
            return True

        return self._write(work)

    def delete(self, contact_id: str) -> bool:
        def work(tx):
            record = tx.run(_DELETE_CONTACT_QUERY, id=contact_id).single()
            return bool(record and record["deleted"])

        return self._write(work)

    def get_by_id(self, contact_id: str) -> Contact | None:
        try:
            with self._driver.session() as session:
                record = session.run(_GET_CONTACT_QUERY, id=contact_id).single()
        except (Neo4jError, DriverError) as e:
            raise PersistenceError(f"Neo4j read failed: {e}") from e
        if not record:
            return None
        return _record_to_contact(record)

    def list_all(self) -> list[Contact]:
        try:
            with self._driver.session() as session:
                records = list(session.run(_LIST_CONTACTS_QUERY))
        except (Neo4jError, DriverError) as e:
            raise PersistenceError(f"Neo4j read failed: {e}") from e
        return [_record_to_contact(rec) for rec in records]

    def _write(self, work):
        try:
            with self._driver.session() as session:
                return session.execute_write(work)
        except (Neo4jError, DriverError) as e:
            raise PersistenceError(f"Neo4j commit failed: {e}") from e


def _contact_params(contact: Contact) -> dict:
    return {
        "id": contact.id,
        "title": contact.title,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "date_of_birth": _date_to_iso(contact.date_of_birth),
    }


def _children_params(contact: Contact) -> dict:
    return {
        "id": contact.id,
        "emails": [
            {"id": e.id, "position": i, "type": e.type, "email": e.email}
            for i, e in enumerate(contact.email_addresses)
        ],
        "addresses": [
            {
                "id": a.id,
                "position": i,
                "type": a.type,
                "street1": a.street1,
                "street2": a.street2,
                "city": a.city,
                "state": a.state,
                "zip": a.zip,
            }
            for i, a in enumerate(contact.addresses)
        ],
    }


def _record_to_contact(record) -> Contact:
    c = record["contact"]
    emails = [
        EmailAddress(id=e["id"], type=e.get("type") or "", email=e.get("email") or "")
        for e in record["emails"]
    ]
    addresses = [
        Address(
            id=a["id"],
            type=a.get("type") or "",
            street1=a.get("street1") or "",
            street2=a.get("street2"),
            city=a.get("city") or "",
            state=a.get("state") or "",
            zip=a.get("zip") or "",
        )
        for a in record["addresses"]
    ]
    return Contact(
        id=c["id"],
        title=c.get("title") or "",
        first_name=c.get("first_name") or "",
        last_name=c.get("last_name") or "",
        date_of_birth=_iso_to_date(c.get("date_of_birth")),
        email_addresses=emails,
        addresses=addresses,
    )
