"""Unit tests for ContactService. In-memory repo, recording notifier and alert sender."""

from datetime import date

from contactmanager.application import (
    UPDATE_EVENT,
    AddressData,
    ContactDeleted,
    ContactNotFound,
    ContactSaved,
    ContactService,
    EditContactView,
    EmailData,
    Invalid,
    PersistenceError,
    PersistenceFailed,
    SaveContactData,
    TransportError,
)
from contactmanager.domain import NIL_CONTACT_ID, Contact
from contactmanager.infrastructure import InMemoryContactRepository


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[str] = []

    def publish(self, event: str) -> int:
        self.events.append(event)
        return 1


class RecordingAlertSender:
    def __init__(self) -> None:
        self.contact_ids: list[str] = []

    def send_contact_updated(self, contact_id: str) -> None:
        self.contact_ids.append(contact_id)


class FailingAlertSender:
    def send_contact_updated(self, contact_id: str) -> None:
        raise TransportError("relay refused connection")


class FailingNotifier:
    def publish(self, event: str) -> int:
        raise TransportError("hub down")


class FailingRepository(InMemoryContactRepository):
    """Commits never succeed."""

    def add(self, contact: Contact) -> None:
        raise PersistenceError("disk full")

    def update(self, contact: Contact) -> bool:
        raise PersistenceError("disk full")

    def delete(self, contact_id: str) -> bool:
        raise PersistenceError("disk full")


def _service(
    repo=None, notifier=None, alert_sender=None
) -> tuple[ContactService, RecordingNotifier, RecordingAlertSender]:
    notifier = notifier or RecordingNotifier()
    alert_sender = alert_sender or RecordingAlertSender()
    service = ContactService(
        repository=repo or InMemoryContactRepository(),
        notifier=notifier,
        alert_sender=alert_sender,
    )
    return service, notifier, alert_sender


def _payload(**overrides) -> SaveContactData:
    values = {
        "title": "Ms",
        "first_name": "Ann",
        "last_name": "Lee",
        "date_of_birth": date(1990, 5, 17),
        "emails": [EmailData(type="home", email="a@x.com")],
        "addresses": [],
    }
    values.update(overrides)
    return SaveContactData(**values)


def _create(service: ContactService, **overrides) -> str:
    result = service.save_contact(_payload(**overrides))
    assert isinstance(result, ContactSaved)
    return result.contact_id


def _emails(view: EditContactView) -> set[tuple[str, str]]:
    return {(e.type, e.email) for e in view.email_addresses}


def test_create_then_edit_returns_same_fields_and_children() -> None:
    service, _, _ = _service()
    payload = _payload(
        emails=[EmailData(type="home", email="a@x.com"), EmailData(type="work", email="ann@work.com")],
        addresses=[
            AddressData(type="home", street1="1 Main St", city="Springfield", state="IL", zip="62701")
        ],
    )
    result = service.save_contact(payload)
    assert isinstance(result, ContactSaved)

    view = service.get_contact_for_edit(result.contact_id)
    assert isinstance(view, EditContactView)
    assert view.contact_id == result.contact_id
    assert view.title == "Ms"
    assert view.first_name == "Ann"
    assert view.last_name == "Lee"
    assert view.date_of_birth == date(1990, 5, 17)
    assert _emails(view) == {("home", "a@x.com"), ("work", "ann@work.com")}
    assert len(view.addresses) == 1
    address = view.addresses[0]
    assert (address.street1, address.street2, address.city, address.zip) == (
        "1 Main St",
        None,
        "Springfield",
        "62701",
    )


def test_ann_lee_scenario() -> None:
    service, _, _ = _service()
    contact_id = _create(service)

    listed = service.list_contacts()
    assert [(c.first_name, c.last_name) for c in listed] == [("Ann", "Lee")]

    view = service.get_contact_for_edit(contact_id)
    assert isinstance(view, EditContactView)
    assert _emails(view) == {("home", "a@x.com")}


def test_resave_replaces_email_list_entirely() -> None:
    service, _, _ = _service()
    contact_id = _create(service, emails=[EmailData("home", "a@x.com"), EmailData("work", "b@x.com")])

    result = service.save_contact(
        _payload(contact_id=contact_id, emails=[EmailData("other", "c@x.com")])
    )
    assert isinstance(result, ContactSaved)
    assert result.contact_id == contact_id

    view = service.get_contact_for_edit(contact_id)
    assert _emails(view) == {("other", "c@x.com")}


def test_resave_with_empty_email_list_leaves_no_emails() -> None:
    service, _, _ = _service()
    contact_id = _create(service)

    service.save_contact(_payload(contact_id=contact_id, emails=[]))

    view = service.get_contact_for_edit(contact_id)
    assert isinstance(view, EditContactView)
    assert view.email_addresses == ()


def test_resave_overwrites_scalars_and_keeps_one_contact() -> None:
    service, _, _ = _service()
    contact_id = _create(service)

    service.save_contact(_payload(contact_id=contact_id, first_name="Anne", date_of_birth=None))

    listed = service.list_contacts()
    assert len(listed) == 1
    assert listed[0].first_name == "Anne"
    assert listed[0].date_of_birth is None


def test_nil_contact_id_creates_new_contact() -> None:
    service, _, _ = _service()
    result = service.save_contact(_payload(contact_id=NIL_CONTACT_ID))
    assert isinstance(result, ContactSaved)
    assert result.contact_id != NIL_CONTACT_ID
    assert len(service.list_contacts()) == 1


def test_list_sorted_by_first_name() -> None:
    service, _, _ = _service()
    for name in ("Zoe", "Ann", "Mike", "Bea"):
        _create(service, first_name=name)

    assert [c.first_name for c in service.list_contacts()] == ["Ann", "Bea", "Mike", "Zoe"]


def test_list_empty() -> None:
    service, _, _ = _service()
    assert service.list_contacts() == []


def test_delete_removes_contact_and_children() -> None:
    service, _, _ = _service()
    contact_id = _create(
        service,
        emails=[EmailData("home", "a@x.com"), EmailData("work", "b@x.com")],
        addresses=[AddressData(type="home", street1="1 Main St", city="X", state="Y", zip="1")],
    )

    result = service.delete_contact(contact_id)
    assert isinstance(result, ContactDeleted)
    assert isinstance(service.get_contact_for_edit(contact_id), ContactNotFound)
    assert service.list_contacts() == []


def test_unknown_id_yields_not_found_everywhere() -> None:
    service, notifier, alert_sender = _service()

    assert isinstance(service.get_contact_for_edit("missing"), ContactNotFound)
    assert isinstance(service.delete_contact("missing"), ContactNotFound)
    result = service.save_contact(_payload(contact_id="missing"))
    assert isinstance(result, ContactNotFound)
    assert result.contact_id == "missing"

    assert service.list_contacts() == []
    assert notifier.events == []
    assert alert_sender.contact_ids == []


def test_edit_with_nil_id_is_not_found() -> None:
    service, _, _ = _service()
    assert isinstance(service.get_contact_for_edit(NIL_CONTACT_ID), ContactNotFound)
    assert isinstance(service.delete_contact(""), ContactNotFound)


def test_prepare_new_contact_is_blank() -> None:
    service, _, _ = _service()
    view = service.prepare_new_contact()
    assert view.is_new
    assert view.contact_id == ""
    assert view.email_addresses == ()
    assert view.addresses == ()


def test_save_broadcasts_update_then_alerts() -> None:
    service, notifier, alert_sender = _service()
    contact_id = _create(service)

    assert notifier.events == [UPDATE_EVENT]
    assert alert_sender.contact_ids == [contact_id]


def test_delete_broadcasts_update_without_alert() -> None:
    service, notifier, alert_sender = _service()
    contact_id = _create(service)

    service.delete_contact(contact_id)

    assert notifier.events == [UPDATE_EVENT, UPDATE_EVENT]
    assert alert_sender.contact_ids == [contact_id]


def test_alert_failure_does_not_undo_save() -> None:
    service, notifier, _ = _service(alert_sender=FailingAlertSender())
    result = service.save_contact(_payload())

    assert isinstance(result, ContactSaved)
    assert result.alert_sent is False
    assert notifier.events == [UPDATE_EVENT]
    assert len(service.list_contacts()) == 1


def test_broadcast_failure_does_not_undo_save() -> None:
    service, _, alert_sender = _service(notifier=FailingNotifier())
    result = service.save_contact(_payload())

    assert isinstance(result, ContactSaved)
    assert alert_sender.contact_ids == [result.contact_id]


def test_persistence_failure_reported_without_side_effects() -> None:
    service, notifier, alert_sender = _service(repo=FailingRepository())

    result = service.save_contact(_payload())
    assert isinstance(result, PersistenceFailed)
    assert "disk full" in result.reason
    assert notifier.events == []
    assert alert_sender.contact_ids == []


def test_persistence_failure_on_update_and_delete() -> None:
    repo = FailingRepository()
    contact = Contact(first_name="Ann")
    InMemoryContactRepository.add(repo, contact)
    service, notifier, _ = _service(repo=repo)

    assert isinstance(service.save_contact(_payload(contact_id=contact.id)), PersistenceFailed)
    assert isinstance(service.delete_contact(contact.id), PersistenceFailed)
    assert notifier.events == []


def test_missing_first_name_is_invalid() -> None:
    service, notifier, _ = _service()

    result = service.save_contact(_payload(first_name="   "))
    assert isinstance(result, Invalid)
    assert "first name" in result.reason.lower()
    assert service.list_contacts() == []
    assert notifier.events == []


def test_blank_email_entry_is_invalid() -> None:
    service, _, _ = _service()
    result = service.save_contact(_payload(emails=[EmailData(type="home", email="")]))
    assert isinstance(result, Invalid)


def test_fields_stored_exactly_as_posted() -> None:
    service, _, _ = _service()
    contact_id = _create(
        service,
        title=" Dr",
        first_name=" Ann ",
        last_name="Lee ",
        emails=[EmailData(" home", "a@x.com ")],
        addresses=[AddressData(type="work ", street1="2 Side St", street2="  ", city="C", state="S", zip=" 9")],
    )

    view = service.get_contact_for_edit(contact_id)
    assert (view.title, view.first_name, view.last_name) == (" Dr", " Ann ", "Lee ")
    assert [(e.type, e.email) for e in view.email_addresses] == [(" home", "a@x.com ")]
    address = view.addresses[0]
    assert (address.type, address.street2, address.zip) == ("work ", "  ", " 9")


def test_children_keep_posted_order() -> None:
    service, _, _ = _service()
    emails = [EmailData("work", "z@x.com"), EmailData("home", "a@x.com"), EmailData("other", "m@x.com")]
    contact_id = _create(service, emails=emails)

    view = service.get_contact_for_edit(contact_id)
    assert [e.email for e in view.email_addresses] == ["z@x.com", "a@x.com", "m@x.com"]


def test_save_unknown_id_is_not_found_even_when_invalid() -> None:
    service, _, _ = _service()
    result = service.save_contact(_payload(contact_id="missing", first_name=""))
    assert isinstance(result, ContactNotFound)
    assert result.contact_id == "missing"
