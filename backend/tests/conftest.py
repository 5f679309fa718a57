import os
import tempfile
import time

# Must be set before config/database are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="bhi-logs-")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from config import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET
from database import Base, SessionLocal, engine
from main import app
from models.inventory_items import InventoryItem, OwnerRole, StockStatus
from models.profiles import Profile, UserRole


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
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


def make_token(sub: str, expires_in: int = 3600) -> str:
    claims = {"sub": sub, "aud": JWT_AUDIENCE, "exp": int(time.time()) + expires_in}
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def make_profile(db):
    def _make(user_id: str, role: UserRole, first_name: str = "Test", last_name: str = "User", is_active: bool = True):
        profile = Profile(id=user_id, first_name=first_name, last_name=last_name, role=role, is_active=is_active)
        db.add(profile)
        db.commit()
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _make


@pytest.fixture
def bhw_headers(make_profile):
    return make_profile("bhw-1", UserRole.BHW, "Ana", "Reyes")


@pytest.fixture
def bns_headers(make_profile):
    return make_profile("bns-1", UserRole.BNS, "Liza", "Cruz")


@pytest.fixture
def midwife_headers(make_profile):
    return make_profile("midwife-1", UserRole.MIDWIFE, "Maria", "Santos")


@pytest.fixture
def admin_headers(make_profile):
    return make_profile("admin-1", UserRole.ADMIN, "Jose", "Dela Cruz")


@pytest.fixture
def add_item(db):
    """Insert a row directly, bypassing the API, with whatever stored status is given."""
    def _add(item_name: str, quantity: int, owner_role: OwnerRole = OwnerRole.BHW, status: StockStatus = StockStatus.NORMAL, **fields):
        item = InventoryItem(item_name=item_name, quantity=quantity, owner_role=owner_role, status=status, **fields)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item.id
    return _add


@pytest.fixture
def stored_status(db):
    def _status(item_id: int) -> StockStatus:
        db.expire_all()
        return db.query(InventoryItem).execution_options(include_deleted=True).filter(InventoryItem.id == item_id).one().status
    return _status
