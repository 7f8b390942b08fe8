import os
import sys
import tempfile
from pathlib import Path

import pytest

# Point the app at an in-memory database and a scratch upload dir before anything imports config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="naimarket-uploads-")
os.environ.setdefault("PASSWORD_HASH_METHOD", "pbkdf2:sha256:1000")
os.environ.setdefault("FILE_TOKEN_SECRET", "naimarket-test-file-secret-0123456789abcdef")

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient  # noqa: E402

import config  # noqa: E402
from app import app  # noqa: E402
from database import SessionLocal, engine  # noqa: E402
from models import Base, Customer, Service, User, Vendor  # noqa: E402
from security import hash_password  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def fresh_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    upload_dir = Path(config.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    for f in upload_dir.iterdir():
        f.unlink()
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload_dir():
    return Path(config.UPLOAD_DIR)


def register(client, name="Amina", email="amina@example.com", password="Secret123!", role="customer"):
    return client.post(
        "/api/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )


@pytest.fixture
def marketplace(db):
    """A vendor with one service and a customer, inserted directly."""
    vendor_user = User(name="Kibet Crafts", email="kibet@example.com", password=hash_password("pw"), role="vendor")
    customer_user = User(name="Wanjiru", email="wanjiru@example.com", password=hash_password("pw"), role="customer")
    db.add_all([vendor_user, customer_user])
    db.flush()
    vendor = Vendor(user_id=vendor_user.id, name="Kibet Crafts", category="crafts")
    customer = Customer(user_id=customer_user.id, name="Wanjiru")
    db.add_all([vendor, customer])
    db.flush()
    service = Service(vendor_id=vendor.id, title="Beaded necklace", price=1500.0, unit="piece",
                      image="necklace.png", category="jewellery")
    db.add(service)
    db.commit()
    return {
        "vendor_id": vendor.id,
        "customer_id": customer.id,
        "service_id": service.id,
        "vendor_user_id": vendor_user.id,
        "customer_user_id": customer_user.id,
    }
