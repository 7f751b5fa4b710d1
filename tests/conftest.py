import pytest
import os
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["NEGATIVE_BALANCE_DISPLAY"] = "clamped"
os.environ["ALLOW_BACKDATED_REQUESTS"] = "false"
os.environ.pop("BOOTSTRAP_ADMIN_EMAIL", None)
os.environ.pop("BOOTSTRAP_ADMIN_PASSWORD", None)

from leavedesk.database import Base, get_db
from leavedesk.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

EMPLOYEE_PASSWORD = "EmployeePassword123!"
ADMIN_PASSWORD = "AdminPassword123!"


def upcoming(weekday: int, weeks_ahead: int = 1) -> date:
    """A date with the given weekday (Monday == 0) at least a week in the future."""
    today = date.today()
    return today + timedelta(days=(weekday - today.weekday()) % 7 + 7 * weeks_ahead)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    import leavedesk.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Use sessionmaker with the active connection
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

def _make_employee(db_session, email, password, role, first_name, last_name, **balances):
    from leavedesk.models.employee import Employee
    from leavedesk.services import auth as auth_service

    employee = Employee(
        email=email,
        hashed_password=auth_service.get_password_hash(password),
        role=role,
        first_name=first_name,
        last_name=last_name,
        is_active=True,
        opening_balance=balances.get("opening_balance", 20.0),
        taken=balances.get("taken", 0.0),
        forfeit=balances.get("forfeit", 0.0),
        pending=balances.get("pending", 0.0),
    )
    db_session.add(employee)
    db_session.flush()
    employee.employee_code = f"EMP{employee.id:03d}"
    db_session.commit()
    return employee

@pytest.fixture(scope="function")
def employee_user(db_session):
    """A regular employee: 22 opening, 8 taken, 1 forfeit, 13 available."""
    from leavedesk.models.employee import EmployeeRole
    return _make_employee(
        db_session, "charl.smit@acmecorp.com", EMPLOYEE_PASSWORD, EmployeeRole.USER, "Charl", "Smit",
        opening_balance=22.0, taken=8.0, forfeit=1.0,
    )

@pytest.fixture(scope="function")
def other_user(db_session):
    from leavedesk.models.employee import EmployeeRole
    return _make_employee(
        db_session, "sarah.johnson@acmecorp.com", EMPLOYEE_PASSWORD, EmployeeRole.USER, "Sarah", "Johnson",
        opening_balance=20.0,
    )

@pytest.fixture(scope="function")
def admin_user(db_session):
    """Create a default admin for tests."""
    from leavedesk.models.employee import EmployeeRole
    return _make_employee(
        db_session, "anna.pohotona@acmecorp.com", ADMIN_PASSWORD, EmployeeRole.ADMIN, "Anna", "Pohotona",
        opening_balance=25.0,
    )

@pytest.fixture(scope="function")
def get_token():
    """Helper fixture to create access tokens."""
    from leavedesk.services.auth import create_access_token

    def _get_token(employee):
        return create_access_token(data={
            "sub": employee.email,
            "role": employee.role.value,
            "employee_id": employee.id,
        })
    return _get_token

@pytest.fixture(scope="function")
def auth_headers(get_token):
    def _headers(employee):
        return {"Authorization": f"Bearer {get_token(employee)}"}
    return _headers

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
