"""
FastAPI backend: contact pages, fragments and the realtime update hub.
Run with uvicorn: uvicorn api.main:app --reload
"""

import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager, suppress
from datetime import date

from fastapi import Depends, FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse, Response
from neo4j import GraphDatabase
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from api.views import render_contact_table, render_edit_contact, render_error, render_index
from contactmanager.application import (
    AddressData,
    AlertSender,
    ContactNotFound,
    ContactService,
    EmailData,
    Invalid,
    PersistenceFailed,
    SaveContactData,
)
from contactmanager.infrastructure import (
    BroadcastHub,
    InMemoryContactRepository,
    Neo4jContactRepository,
    NullAlertSender,
    SmtpAlertSender,
    SmtpSettings,
    ensure_contact_constraint,
)
from contactmanager.infrastructure.mail import DEFAULT_RECIPIENT, DEFAULT_SENDER

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

STORE_NEO4J = "neo4j"
STORE_MEMORY = "memory"

# Every connected browser subscribes here; the service publishes "Update" after each change.
hub = BroadcastHub()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _store_kind() -> str:
    return os.environ.get("CONTACT_STORE", STORE_NEO4J).strip().lower() or STORE_NEO4J


def _get_driver():
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    return GraphDatabase.driver(uri, auth=(user, password))


def _get_alert_sender() -> AlertSender:
    if not _env_flag("ALERTS_ENABLED", True):
        return NullAlertSender()
    settings = SmtpSettings(
        host=os.environ.get("SMTP_HOST", "127.0.0.1").strip(),
        port=int(os.environ.get("SMTP_PORT", "25")),
        starttls=_env_flag("SMTP_STARTTLS", False),
        timeout=float(os.environ.get("SMTP_TIMEOUT", "10")),
        sender=os.environ.get("ALERT_SENDER", DEFAULT_SENDER).strip(),
        recipient=os.environ.get("ALERT_RECIPIENT", DEFAULT_RECIPIENT).strip(),
    )
    return SmtpAlertSender(settings)


def _build_service(store: str, driver) -> ContactService:
    if store == STORE_MEMORY:
        repo = InMemoryContactRepository()
    elif store == STORE_NEO4J:
        repo = Neo4jContactRepository(driver)
    else:
        raise RuntimeError(f"Unknown CONTACT_STORE {store!r}; use {STORE_NEO4J!r} or {STORE_MEMORY!r}")
    logger.info("Contact store: %s", store)
    return ContactService(repo, hub, _get_alert_sender())


def get_service(request: Request) -> ContactService:
    return request.app.state.service


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.driver = None
    app.state.service = None
    store = _store_kind()
    try:
        if store == STORE_NEO4J:
            app.state.driver = _get_driver()
            ensure_contact_constraint(app.state.driver)
        # Built once, before the first request, so every request shares one repository.
        app.state.service = _build_service(store, app.state.driver)
        yield
    finally:
        if getattr(app.state, "driver", None) is not None:
            app.state.driver.close()


app = FastAPI(title="ContactManager", lifespan=lifespan)


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- Request bodies (field names as posted by the edit form) ---


class EmailBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = Field(None, alias="Type")
    email: str | None = Field(None, alias="Email")


class AddressBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = Field(None, alias="Type")
    street1: str | None = Field(None, alias="Street1")
    street2: str | None = Field(None, alias="Street2")
    city: str | None = Field(None, alias="City")
    state: str | None = Field(None, alias="State")
    zip: str | None = Field(None, alias="Zip")


class SaveContactBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contact_id: str | None = Field(None, alias="ContactId")
    title: str | None = Field(None, alias="Title")
    first_name: str | None = Field(None, alias="FirstName")
    last_name: str | None = Field(None, alias="LastName")
    date_of_birth: date | None = Field(
        None, validation_alias=AliasChoices("DOB", "DateOfBirth", "date_of_birth")
    )
    emails: list[EmailBody] = Field(default_factory=list, alias="Emails")
    addresses: list[AddressBody] = Field(default_factory=list, alias="Addresses")

    def to_data(self) -> SaveContactData:
        return SaveContactData(
            contact_id=self.contact_id,
            title=self.title or "",
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            date_of_birth=self.date_of_birth,
            emails=[EmailData(type=e.type or "", email=e.email or "") for e in self.emails],
            addresses=[
                AddressData(
                    type=a.type or "",
                    street1=a.street1 or "",
                    street2=a.street2,
                    city=a.city or "",
                    state=a.state or "",
                    zip=a.zip or "",
                )
                for a in self.addresses
            ],
        )


def _error_response(result: ContactNotFound | Invalid | PersistenceFailed, action: str) -> HTMLResponse:
    if isinstance(result, ContactNotFound):
        return HTMLResponse(
            render_error(f"Failed to {action} Contact: contact {result.contact_id} not found"),
            status_code=404,
        )
    if isinstance(result, Invalid):
        return HTMLResponse(render_error(f"Failed to {action} Contact: {result.reason}"), status_code=400)
    return HTMLResponse(render_error(f"Failed to {action} Contact: {result.reason}"), status_code=500)


# --- Pages and fragments ---


@app.get("/", response_class=HTMLResponse)
@app.get("/Contacts/Index", response_class=HTMLResponse)
def index():
    return HTMLResponse(render_index())


@app.get("/Contacts/GetContacts", response_class=HTMLResponse)
def get_contacts(service: ContactService = Depends(get_service)):
    result = service.list_contacts()
    if isinstance(result, PersistenceFailed):
        return _error_response(result, "List")
    return HTMLResponse(render_contact_table(result))


@app.get("/Contacts/NewContact", response_class=HTMLResponse)
def new_contact(service: ContactService = Depends(get_service)):
    return HTMLResponse(render_edit_contact(service.prepare_new_contact()))


@app.get("/Contacts/EditContact", response_class=HTMLResponse)
def edit_contact(id: str, service: ContactService = Depends(get_service)):
    result = service.get_contact_for_edit(id)
    if isinstance(result, (ContactNotFound, PersistenceFailed)):
        return _error_response(result, "Edit")
    return HTMLResponse(render_edit_contact(result))


@app.post("/Contacts/SaveContact")
def save_contact(body: SaveContactBody, service: ContactService = Depends(get_service)):
    result = service.save_contact(body.to_data())
    if isinstance(result, (ContactNotFound, Invalid, PersistenceFailed)):
        return _error_response(result, "Save")
    return Response(status_code=200)


@app.get("/Contacts/DeleteContact")
def delete_contact(id: str, service: ContactService = Depends(get_service)):
    result = service.delete_contact(id)
    if isinstance(result, (ContactNotFound, PersistenceFailed)):
        return _error_response(result, "Delete")
    return Response(status_code=200)


# --- Realtime hub ---


async def _forward_events(websocket: WebSocket, subscription) -> None:
    while True:
        event = await subscription.get()
        await websocket.send_json({"event": event})


@app.websocket("/hubs/contacts")
async def contact_hub(websocket: WebSocket):
    """Push {"event": "Update"} to the client after every saved or deleted contact."""
    subscription = hub.subscribe()
    try:
        await websocket.accept()
        forward = asyncio.create_task(_forward_events(websocket, subscription))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            forward.cancel()
            with suppress(asyncio.CancelledError, WebSocketDisconnect):
                await forward
    finally:
        hub.unsubscribe(subscription)
