"""Shared fixtures: in-memory SQLite database, app client and seeded accounts."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from slugify import slugify

from storefront.auth.jwt_validator import jwt_validator
from storefront.auth.passwords import hash_password
from storefront.db.database import Base, get_db
from storefront.main import app
from storefront.models import Category, Product, User
from storefront.models.user import ROLE_ADMIN, ROLE_USER

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def db_session():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client bound to the in-memory database (startup migrations skipped)."""

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Account Fixtures
# =============================================================================


def make_user(db, email, role=ROLE_USER, password="secret123", answer="Blue"):
    user = User(
        name=email.split("@")[0].title(),
        email=email,
        password=hash_password(password),
        phone="5551234567",
        address="1 Main Street",
        answer=answer,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    return make_user(db_session, "jane@example.com")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", role=ROLE_ADMIN)


@pytest.fixture
def user_headers(user):
    return {"Authorization": f"Bearer {jwt_validator.create_token(str(user.id))}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {jwt_validator.create_token(str(admin.id))}"}


# =============================================================================
# Catalog Fixtures
# =============================================================================


def make_category(db, name):
    category = Category(name=name, slug=slugify(name))
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def make_product(db, category, name, price=10.0, quantity=5, description=None, photo=None):
    product = Product(
        name=name,
        slug=slugify(name),
        description=description or f"{name} description",
        price=price,
        quantity=quantity,
        category_id=category.id,
        shipping=True,
    )
    if photo:
        product.photo = photo
        product.photo_content_type = "image/png"
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def electronics(db_session):
    return make_category(db_session, "Electronics")


@pytest.fixture
def books(db_session):
    return make_category(db_session, "Books")


@pytest.fixture
def laptop(db_session, electronics):
    return make_product(db_session, electronics, "Gaming Laptop", price=1500.0, description="Fast machine")


@pytest.fixture
def novel(db_session, books):
    return make_product(db_session, books, "Mystery Novel", price=12.5, description="A page turner")
