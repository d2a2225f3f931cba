from __future__ import annotations

import os
import warnings

os.environ.setdefault("ENV", "test")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from assetdesk.core.config import settings  # noqa: E402
from assetdesk.core.rbac import resolve_identity  # noqa: E402
from assetdesk.core.security import pwd_context  # noqa: E402
from assetdesk.db import session as db_session  # noqa: E402
from assetdesk.db.base_class import Base  # noqa: E402
from assetdesk.db.session import SessionLocal  # noqa: E402
from assetdesk.models import models  # noqa: E402,F401
from assetdesk.models.models import Role  # noqa: E402
from assetdesk.models.schemas import UserCreate, UserDepartmentCreate  # noqa: E402
from assetdesk.services.company_service import register_company  # noqa: E402
from assetdesk.store import MemoryEntityStore, SqlEntityStore, reset_memory_store  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")


test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Ensure application code uses the test engine
settings.DATABASE_URL = TEST_DATABASE_URL  # type: ignore[attr-defined]
settings.ENV = "test"  # type: ignore[attr-defined]
settings.STORE_BACKEND = "sql"  # type: ignore[attr-defined]
db_session.engine = test_engine  # type: ignore[assignment]
SessionLocal.configure(bind=test_engine)

# Minimum bcrypt cost keeps fixture sign-ups fast
pwd_context.update(bcrypt__rounds=4)

warnings.filterwarnings("ignore", category=DeprecationWarning, module="passlib.utils")


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema and memory store."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    reset_memory_store()
    yield


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(params=["memory", "sql"])
def store(request, db_session):
    """Run the test once against each entity store back-end."""
    if request.param == "memory":
        yield MemoryEntityStore()
    else:
        yield SqlEntityStore(db_session)


def _register(store, company_name: str, email: str, pattern: str | None = None):
    return register_company(
        store,
        {
            "company_name": company_name,
            "asset_id_pattern": pattern,
            "admin_name": f"{company_name} Admin",
            "admin_email": email,
            "password": "correct-horse-battery",
        },
    )


@pytest.fixture
def company(store):
    """Registered company with its 'General' department and admin."""
    return _register(store, "Acme Corp", "admin@acme.test")


@pytest.fixture
def other_company(store):
    return _register(store, "Globex", "admin@globex.test", pattern="GX-###")


@pytest.fixture
def admin(store, company):
    return resolve_identity(store, company.admin.id)


@pytest.fixture
def make_employee(store):
    """Create an employee in ``company_id`` with the given memberships and return their identity."""
    counter = {"n": 0}

    def _make(company_id: int, department_ids=()):
        counter["n"] += 1
        user = store.create_user(
            UserCreate(
                company_id=company_id,
                name=f"Employee {counter['n']}",
                email=f"employee{counter['n']}@example.test",
                role=Role.EMPLOYEE,
            )
        )
        for department_id in department_ids:
            store.assign_user_to_department(UserDepartmentCreate(user_id=user.id, department_id=department_id))
        return resolve_identity(store, user.id)

    return _make


# FastAPI TestClient fixture
from fastapi.testclient import TestClient  # noqa: E402
from assetdesk.api.main import app  # noqa: E402


@pytest.fixture
def client():
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)
