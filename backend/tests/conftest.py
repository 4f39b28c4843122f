import os, sys, pathlib, tempfile

ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("JWT_EXPIRATION_MINUTES", "1440")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix = "thesis-uploads-"))

import pytest
from fastapi.testclient import TestClient

from main import app
from config.database import Base, SessionLocal, engine, init_db
from config.jwt import create_access_token
from config.rate_limit import limiter
from schemas.auth_schema import StudentRegistration, SupervisorRegistration, AdminRegistration, SessionClaims
from services.user_service import register

PASSWORD = "Passw0rd!"

@pytest.fixture(autouse = True)
def reset_db():
    init_db()
    yield
    Base.metadata.drop_all(bind = engine)

# Login attempts are counted per test
@pytest.fixture(autouse = True)
def reset_rate_limits():
    limiter.reset()
    yield

@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c

# Factories for users of each role
@pytest.fixture
def make_student(db):
    counter = {"n": 0}
    def _make(email = None, first_name = "Ada", last_name = "Lovelace", student_id = None):
        counter["n"] += 1
        n = counter["n"]
        return register(db, StudentRegistration(
            role = "STUDENT",
            email = email or f"student{n}@x.com",
            password = PASSWORD,
            first_name = first_name,
            last_name = last_name,
            student_id = student_id or f"S-{1000 + n}",
            department = "Computer Science",
            program = "Thesis Program",
            enrollment_year = 2024,
        ))
    return _make

@pytest.fixture
def make_supervisor(db):
    counter = {"n": 0}
    def _make(email = None, first_name = "Grace", last_name = "Hopper"):
        counter["n"] += 1
        return register(db, SupervisorRegistration(
            role = "SUPERVISOR",
            email = email or f"supervisor{counter['n']}@x.com",
            password = PASSWORD,
            first_name = first_name,
            last_name = last_name,
            department = "Computer Science",
            specialization = "Compilers",
        ))
    return _make

@pytest.fixture
def make_admin(db):
    counter = {"n": 0}
    def _make(email = None):
        counter["n"] += 1
        return register(db, AdminRegistration(
            role = "ADMIN",
            email = email or f"admin{counter['n']}@x.com",
            password = PASSWORD,
            first_name = "Alan",
            last_name = "Turing",
            department = "Registry",
            position = "Coordinator",
        ))
    return _make

def claims_for(user) -> SessionClaims:
    return SessionClaims(user_id = user.id, role = user.role)

def auth_header(user) -> dict:
    token = create_access_token(subject = str(user.id), extra_claims = {"role": user.role.value})
    return {"Authorization": f"Bearer {token}"}
