import os

os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CASCADE_DELETE_MODE"] = "transactional"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base, get_db, enable_sqlite_foreign_keys
from core.security import AdminContext
from main import app
from schemas.pin_schema import PINRangeCreateRequest
from schemas.product_schema import ProductCreateRequest
from schemas.student_schema import StudentRegistrationRequest
from services.pin_allocation_service import PINAllocationService
from services.product_service import ProductService
from services.registration_service import RegistrationService

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key", "X-Admin-Name": "test-admin"}


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture()
def admin():
    return AdminContext(admin_name="test-admin")


@pytest.fixture()
def create_range(db, admin):
    def _create(start=1, end=5, joining_year=2024, branch="CME", year=1, section="A"):
        request = PINRangeCreateRequest(
            joining_year=joining_year,
            branch=branch,
            year=year,
            section=section,
            start_sequence=start,
            end_sequence=end,
        )
        return PINAllocationService.create_range(db, admin, request)
    return _create


@pytest.fixture()
def register_student(db):
    def _register(pin_number, email=None, confirm=True):
        email = email or f"{pin_number.lower().replace('-', '.')}@campus.edu"
        result = RegistrationService.register_student(db, StudentRegistrationRequest(
            pin_number=pin_number,
            full_name="Test Student",
            email=email,
            phone_number="9876543210",
        ))
        assert result.success, result.error
        if confirm:
            result = RegistrationService.confirm_email(db, result.data.id)
        return result.data
    return _register


@pytest.fixture()
def create_listing(db):
    def _create(seller_id, title="Engineering Mathematics", price=100, category="books", branch=None):
        result = ProductService.create_product(db, ProductCreateRequest(
            seller_id=seller_id,
            title=title,
            description=f"{title} in good condition",
            price=price,
            category=category,
            branch=branch,
            image_urls=["https://img.campus.edu/1.jpg"],
        ))
        assert result.success, result.error
        return result.data
    return _create
