"""Общие фикстуры: приложение поверх in-memory MongoDB."""

import os
import uuid

# Окружение выставляем до импорта приложения: settings и логирование читают его при импорте
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ["FILE_LOGGING"] = "false"
os.environ["CONSOLE_LOGGING"] = "false"
os.environ["RABBITMQ_LOGGING"] = "false"

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from main import app
from app.db.database import get_database


@pytest.fixture
def db():
    """Отдельная in-memory база на каждый тест."""
    return AsyncMongoMockClient()[f"quiz_test_{uuid.uuid4().hex}"]


@pytest.fixture
def client(db):
    """Тестовый клиент; startup не запускается, реальная база не нужна."""
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def question_payload():
    return {
        "question_text": "2+2=?",
        "subject": "Math",
        "topic": "Arithmetic",
        "options": [
            {"text": "3", "is_correct": False},
            {"text": "4", "is_correct": True},
        ],
    }


@pytest.fixture
def create_question(client):
    """Создаёт вопрос через API и возвращает сохранённый документ."""

    def _create(payload, headers=None):
        response = client.post("/api/questions", json=payload, headers=headers or {})
        assert response.status_code == 200, response.text
        return response.json()["questions"][0]

    return _create
