# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Shared fixtures for messaging tests."""

from concurrent.futures import Executor, Future
from datetime import datetime, timedelta, timezone

import pytest

from app.message_store import MessageStore
from app.service import MessagingService
from fieldops_directory import (
    ADMIN,
    CONTRACTOR,
    PROJECT_MANAGER,
    SUPER_ADMIN,
    VIEWER,
    DocumentIdentityDirectory,
    DocumentProjectDirectory,
    UserRecord,
)
from fieldops_metrics import NoOpMetricsCollector
from fieldops_notifications import RecordingNotifier
from fieldops_reporting import SilentErrorReporter
from fieldops_storage import InMemoryDocumentStore

USERS = [
    UserRecord("root", SUPER_ADMIN, True, "Rita Root", "rita@example.com"),
    UserRecord("admin", ADMIN, True, "Adam Admin", "adam@example.com"),
    UserRecord("pm", PROJECT_MANAGER, True, "Paula Manager", "paula@example.com"),
    UserRecord("pm2", PROJECT_MANAGER, True, "Peter Manager", "peter@example.com"),
    UserRecord("c", CONTRACTOR, True, "Carl Contractor", "carl@example.com"),
    UserRecord("d", CONTRACTOR, True, "Dana Contractor", "dana@example.com"),
    UserRecord("gone", CONTRACTOR, False, "Gina Gone", "gina@example.com"),
    UserRecord("viewer", VIEWER, True, "Vic Viewer", "vic@example.com"),
]

PROJECTS = [
    {"_id": "p1", "project_manager_id": "pm", "contractor_id": "c"},
    {"_id": "p2", "project_manager_id": "pm2", "contractor_id": "d"},
    {"_id": "p3", "project_manager_id": "pm", "contractor_id": "gone"},
]


class FakeClock:
    """Advances one second per reading so creation order is strict."""

    def __init__(self, start=datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class ImmediateExecutor(Executor):
    """Runs submitted work inline."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def users():
    return list(USERS)


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def document_store():
    store = InMemoryDocumentStore()
    store.connect()
    for user in USERS:
        store.insert_document("users", user.to_document())
    for project in PROJECTS:
        store.insert_document("projects", project)
    return store


@pytest.fixture
def identity_directory(document_store):
    return DocumentIdentityDirectory(document_store)


@pytest.fixture
def project_directory(document_store):
    return DocumentProjectDirectory(document_store)


@pytest.fixture
def message_store(document_store, clock):
    return MessageStore(document_store, clock=clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def metrics_collector():
    return NoOpMetricsCollector()


@pytest.fixture
def error_reporter():
    return SilentErrorReporter()


@pytest.fixture
def service(document_store, identity_directory, project_directory, notifier, metrics_collector,
            error_reporter, clock, immediate_executor):
    return MessagingService(
        document_store=document_store,
        identity_directory=identity_directory,
        project_directory=project_directory,
        notifier=notifier,
        metrics_collector=metrics_collector,
        error_reporter=error_reporter,
        default_page_size=20,
        max_page_size=100,
        notification_executor=immediate_executor,
        clock=clock,
    )
