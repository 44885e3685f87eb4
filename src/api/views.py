"""HTML rendering for the contacts pages: the page shell and the fragments it loads."""

from html import escape

from contactmanager.application import ContactSummary, EditContactView

_PAGE_SHELL = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Contact Manager</title>
</head>
<body>
<h1>Contacts</h1>
<button id="new-contact">New contact</button>
<div id="contact-table"></div>
<div id="edit-contact"></div>
<script>
const table = document.getElementById("contact-table");
const editor = document.getElementById("edit-contact");
async function loadContacts() {
    table.innerHTML = await (await fetch("/Contacts/GetContacts")).text();
}
document.getElementById("new-contact").onclick = async () => {
    editor.innerHTML = await (await fetch("/Contacts/NewContact")).text();
};
const hub = new WebSocket(`ws://${location.host}/hubs/contacts`);
hub.onmessage = (msg) => {
    if (JSON.parse(msg.data).event === "Update") loadContacts();
};
loadContacts();
</script>
</body>
</html>
"""


def _text(value) -> str:
    return escape("" if value is None else str(value))


def render_index() -> str:
    return _PAGE_SHELL


def render_contact_table(contacts: list[ContactSummary]) -> str:
    """Table of contacts; one row per contact with its email addresses."""
    rows = []
    for c in contacts:
        emails = ", ".join(_text(e.email) for e in c.email_addresses)
        rows.append(
            f'<tr data-contact-id="{_text(c.contact_id)}">'
            f"<td>{_text(c.title)}</td>"
            f"<td>{_text(c.first_name)} {_text(c.last_name)}</td>"
            f"<td>{_text(c.date_of_birth)}</td>"
            f"<td>{emails}</td>"
            "</tr>"
        )
    return (
        '<table class="contact-table">'
        "<thead><tr><th>Title</th><th>Name</th><th>Date of birth</th><th>Email</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table>"
    )


def render_edit_contact(view: EditContactView) -> str:
    """Edit form; blank when view is new."""
    email_rows = "".join(
        '<li class="email">'
        f'<input name="Type" value="{_text(e.type)}">'
        f'<input name="Email" value="{_text(e.email)}">'
        "</li>"
        for e in view.email_addresses
    )
    address_rows = "".join(
        '<li class="address">'
        f'<input name="Type" value="{_text(a.type)}">'
        f'<input name="Street1" value="{_text(a.street1)}">'
        f'<input name="Street2" value="{_text(a.street2)}">'
        f'<input name="City" value="{_text(a.city)}">'
        f'<input name="State" value="{_text(a.state)}">'
        f'<input name="Zip" value="{_text(a.zip)}">'
        "</li>"
        for a in view.addresses
    )
    heading = "New contact" if view.is_new else "Edit contact"
    return (
        '<form class="edit-contact">'
        f"<h2>{heading}</h2>"
        f'<input type="hidden" name="ContactId" value="{_text(view.contact_id)}">'
        f'<input name="Title" value="{_text(view.title)}">'
        f'<input name="FirstName" value="{_text(view.first_name)}">'
        f'<input name="LastName" value="{_text(view.last_name)}">'
        f'<input type="date" name="DOB" value="{_text(view.date_of_birth)}">'
        f'<ul class="emails">{email_rows}</ul>'
        f'<ul class="addresses">{address_rows}</ul>'
        "</form>"
    )


def render_error(message: str) -> str:
    return f'<div class="error">{_text(message)}</div>'
