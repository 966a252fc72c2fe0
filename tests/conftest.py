# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pulse-chat-uploads-")

from pulse_chat.api.v1.dependencies import get_media_storage_dep, get_session_factory, get_sms_sender_dep
from pulse_chat.core.security import create_session_token
from pulse_chat.core.settings import settings
from pulse_chat.db.session import Base, build_engine
from pulse_chat.db.session import get_db as app_get_session
from pulse_chat.main import app as fastapi_app
from pulse_chat.models import Message, User
from pulse_chat.services.sms import SmsSender
from pulse_chat.services.storage import LocalMediaStorage

TEST_DB_URL = "sqlite://"

_PHONE_COUNTER = count(1000)


class RecordingSmsSender(SmsSender):
    """SMS sender that keeps every dispatched code in memory."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send_code(self, phone: str, code: str) -> None:
        self.sent.append((phone, code))

    def last_code_for(self, phone: str) -> str:
        return next(code for sent_phone, code in reversed(self.sent) if sent_phone == phone)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture()
def upload_storage(tmp_path) -> LocalMediaStorage:
    return LocalMediaStorage(tmp_path, "/uploads")


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    engine: Engine,
    db_session: Session,
    sms_sender: RecordingSmsSender,
    upload_storage: LocalMediaStorage,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    overrides: dict[Callable, Callable] = {
        app_get_session: _get_session_override,
        get_sms_sender_dep: lambda: sms_sender,
        get_media_storage_dep: lambda: upload_storage,
        get_session_factory: lambda: sessionmaker(bind=engine, expire_on_commit=False),
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with unique phone numbers."""

    def _make_user(name: str | None = None, phone: str | None = None) -> User:
        user = User(
            phone=phone or f"7999000{next(_PHONE_COUNTER):04d}",
            name=name,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user) -> User:
    return make_user("Alice", "79990000001")


@pytest.fixture()
def bob(make_user) -> User:
    return make_user("Bob", "79990000002")


@pytest.fixture()
def carol(make_user) -> User:
    return make_user("Carol", "79990000003")


def session_headers(user: User) -> dict[str, str]:
    """Return request headers carrying a session cookie for ``user``."""
    token = create_session_token(user.id, user.phone)
    return {"Cookie": f"{settings.session_cookie_name}={token}"}


@pytest.fixture()
def alice_auth(alice: User) -> dict[str, str]:
    return session_headers(alice)


@pytest.fixture()
def bob_auth(bob: User) -> dict[str, str]:
    return session_headers(bob)


@pytest.fixture()
def make_message(db_session: Session) -> Callable[..., Message]:
    """Return a factory persisting messages directly, bypassing validation."""

    def _make_message(sender: User, receiver: User | None, text: str | None = "hello", **fields) -> Message:
        message = Message(sender_id=sender.id, receiver_id=receiver.id if receiver else None, text=text, **fields)
        db_session.add(message)
        db_session.commit()
        db_session.refresh(message)
        return message

    return _make_message
