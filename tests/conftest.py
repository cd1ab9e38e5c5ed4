"""Shared fixtures for the TechMock test suite."""

from __future__ import annotations

import random

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from techmock_app.core.collection_store import JsonFileStore, MemoryStore
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.core.question_generator import QuestionGenerator
from techmock_app.server.api_server import create_api_app


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def file_store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def offline_generator() -> QuestionGenerator:
    """Generator without a credential: always produces placeholder questions."""

    def refuse_client(api_key: str) -> None:
        raise AssertionError("no client may be created without a credential")

    return QuestionGenerator(None, client_factory=refuse_client, rng=random.Random(7))


@pytest.fixture
def manager(memory_store, offline_generator) -> MockTestManager:
    return MockTestManager(memory_store, offline_generator, rng=random.Random(42))


@pytest.fixture
def api_app(manager) -> FastAPI:
    return create_api_app(manager)


@pytest.fixture
def client(api_app) -> TestClient:
    return TestClient(api_app)


@pytest.fixture
def admin_client(client) -> TestClient:
    response = client.post(
        "/api/register",
        json={"name": "Grace", "email": "grace@x.com", "role": "admin"},
    )
    assert response.status_code == 201
    return client


@pytest.fixture
def student_client(client) -> TestClient:
    response = client.post(
        "/api/register",
        json={"name": "Ada", "email": "ada@x.com", "role": "student"},
    )
    assert response.status_code == 201
    return client
