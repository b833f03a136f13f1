import pytest
from fastapi.testclient import TestClient

from classdesk.records.store import reset_record_store
from classdesk.tables.view import ColumnSpec


@pytest.fixture
def store():
    """A freshly seeded global record store."""
    return reset_record_store()


@pytest.fixture
def client(store):
    from classdesk.api.main import app

    return TestClient(app)


@pytest.fixture
def student_columns():
    return [
        ColumnSpec(key="name", label="Name", sortable=True),
        ColumnSpec(key="email", label="Email", hide_on_mobile=True),
        ColumnSpec(key="grade", label="Grade", sortable=True),
        ColumnSpec(key="status", label="Status"),
    ]


def make_rows(count, **extra):
    return [
        {"id": str(i), "name": f"Student {i:02d}", "email": f"s{i}@school.test", "grade": "10", **extra}
        for i in range(1, count + 1)
    ]
