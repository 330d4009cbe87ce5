import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.config import settings
from shared.core.database import Base
from storefront_service.app.core import dependencies
from storefront_service.app.crud.inventory_ledger import InventoryLedger
from storefront_service.app.main import app
from storefront_service.app.schemas.inventory_schemas import InventoryRecord
from storefront_service.app.schemas.order_schemas import OrderItem
from storefront_service.app.stores.inventory_store import FileInventoryStore, SqlInventoryStore
from storefront_service.app.stores.order_store import FileOrderStore
from storefront_service.app.stores.review_store import FileReviewStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"
ADMIN_SECRET = "test-jwt-secret"


def line(product_id, quantity, name=None, stock=0, price=10):
    """Build an order line item the way the storefront cart sends it."""
    return OrderItem.model_validate({
        "product": {
            "id": product_id,
            "name": name if name is not None else product_id,
            "price": price,
            "stockQuantity": stock,
        },
        "quantity": quantity,
    })


def put_stock(store, levels):
    store.bulk_upsert([
        InventoryRecord(id=product_id, name=product_id, stock_quantity=qty)
        for product_id, qty in levels.items()
    ])


def stock_levels(store):
    return {record.id: record.stock_quantity for record in store.read_all()}


class RecordingMailService:
    def __init__(self):
        self.sent = []

    def send_order_emails(self, order, subject_prefix="New"):
        self.sent.append((order, subject_prefix))


@pytest.fixture
def sql_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture(params=["file", "sql"])
def inventory_store(request, tmp_path, sql_session_factory):
    if request.param == "file":
        return FileInventoryStore.in_dir(str(tmp_path), seed=[])
    return SqlInventoryStore(sql_session_factory, seed=[])


@pytest.fixture
def ledger(inventory_store):
    return InventoryLedger(inventory_store)


@pytest.fixture
def file_ledger(tmp_path):
    return InventoryLedger(FileInventoryStore.in_dir(str(tmp_path), seed=[]))


@pytest.fixture
def order_store(tmp_path):
    return FileOrderStore.in_dir(str(tmp_path))


@pytest.fixture
def review_store(tmp_path):
    return FileReviewStore.in_dir(str(tmp_path))


@pytest.fixture
def mail_service():
    return RecordingMailService()


@pytest.fixture
def admin_settings(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "ADMIN_JWT_SECRET", ADMIN_SECRET)
    return settings


@pytest.fixture
def client(file_ledger, order_store, review_store, mail_service):
    app.dependency_overrides[dependencies.get_inventory_ledger] = lambda: file_ledger
    app.dependency_overrides[dependencies.get_order_store] = lambda: order_store
    app.dependency_overrides[dependencies.get_review_store] = lambda: review_store
    app.dependency_overrides[dependencies.get_mail_service] = lambda: mail_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client, admin_settings):
    response = client.post(
        "/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
