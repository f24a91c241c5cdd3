import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LINE_CHANNEL_TOKEN", "test-token")
os.environ.setdefault("LINE_CHANNEL_SECRET", "test-secret")

from typing import Iterable, Optional
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gmethod.database import Base
from gmethod.models import Message, Option, ReplyPattern, User
from gmethod.services.content_graph_service import MESSAGE_SCOPE_IDS
from gmethod.services.line_service import LineService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN; emit it ourselves so SAVEPOINTs nest inside the transaction.
    @event.listens_for(engine, "connect")
    def disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """SQLite in-memory session with all gmethod tables."""
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def line():
    """LINE service double that records outbound calls."""
    service = Mock(spec=LineService)
    service.reply.return_value = {"ok": True, "result": {}}
    service.broadcast.return_value = {"ok": True, "result": {}}
    service.push_many.return_value = 0
    service.get_profile.return_value = None
    return service


@pytest.fixture
def user(db):
    user = User(line_user_id="U-test")
    db.add(user)
    db.flush()
    return user


def add_node(db, node_id: int, content: str, options: Iterable[str] = ()) -> Message:
    node = Message(id=node_id, content=content)
    db.add(node)
    for position, text in enumerate(options, start=1):
        db.add(Option(message_id=node_id, position=position, content=text))
    db.flush()
    return node


def add_scope_node(db, scope: str, content: str, options: Iterable[str] = ()) -> Message:
    return add_node(db, MESSAGE_SCOPE_IDS[scope], content, options)


def add_edge(
    db,
    source_id: int,
    target_id: int,
    position: Optional[int] = None,
    execution_method: str = "base",
    edge_id: Optional[int] = None,
) -> ReplyPattern:
    edge = ReplyPattern(
        id=edge_id,
        sent_message_id=source_id,
        next_message_id=target_id,
        position=position,
        execution_method=execution_method,
    )
    db.add(edge)
    db.flush()
    return edge


@pytest.fixture
def root(db) -> Message:
    """Root menu with two options, plus the select-number prompt."""
    add_scope_node(db, "select_number", "番号を選んでね")
    return add_scope_node(db, "default", "トップ", ["願い", "嫌だ"])
