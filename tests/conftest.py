"""Shared pytest fixtures and fakes."""

import json
import threading

import pytest

from src.memory.models import FaqResult
from src.memory.vector_store import QUESTION_VECTOR, RESPONSE_VECTOR


class FakeFaqCollection:
    """
    In-memory stand-in for FaqCollection.

    Searches return scripted (FaqResult, score) lists per vector field, so
    tests control similarity scores exactly. Every call is recorded.
    """

    def __init__(self, name="faq", exists=False, search_results=None):
        self.name = name
        self._exists = exists
        self.search_results = search_results or {QUESTION_VECTOR: [], RESPONSE_VECTOR: []}
        self.records = []
        self.calls = []
        self._lock = threading.Lock()

    def exists(self):
        self.calls.append("exists")
        return self._exists

    def create(self):
        self.calls.append("create")
        self._exists = True

    def delete(self):
        self.calls.append("delete")
        self._exists = False
        self.records.clear()

    def count(self):
        return len(self.records)

    def upsert(self, record):
        with self._lock:
            self.calls.append("upsert")
            self.records.append(record)

    def search(self, field, vector, top, skip=0):
        self.calls.append(("search", field, top, skip))
        return list(self.search_results[field])[skip:skip + top]


def faq(question, response="answer"):
    return FaqResult(question=question, response=response)


@pytest.fixture
def seed_entries():
    return [
        {"question": "How do I reset my password?", "response": "Click 'Forgot password' on the login screen."},
        {"question": "How do I cancel my subscription?", "response": "Go to Billing > Subscription."},
        {"question": "How do I contact support?", "response": "E-mail support@example.com."},
    ]


@pytest.fixture
def seed_file(tmp_path, seed_entries):
    path = tmp_path / "faq.json"
    path.write_text(json.dumps(seed_entries), encoding="utf-8")
    return path
