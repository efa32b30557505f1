import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stayll.main import app
from stayll.db.base import Base, create_db_engine, get_db
from stayll.db.models import Listing, Property, User
from stayll.api.generation import ProviderOrchestrator, TextProvider, get_orchestrator
from stayll.core.exceptions import UpstreamProviderFailure


class StubProvider(TextProvider):
    """Provider returning a scripted result without touching the network."""

    def __init__(self, name, result="Generated listing", configured=True):
        super().__init__(name=name, api_key="test-key" if configured else "")
        self.result = result
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def failing(name, status_code=500, substitutable=True):
    return UpstreamProviderFailure(name, f"{name} failed", status_code=status_code, substitutable=substitutable)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    test_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def providers():
    """Mutable provider list used by the client's orchestrator."""
    return [StubProvider("stub:primary", "Sunny two bedroom in Austin.")]

@pytest.fixture
def client(session_factory, providers):
    """Create a test client for the FastAPI application."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_orchestrator] = lambda: ProviderOrchestrator(providers)
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def sample_user(db):
    user = User(id="user-1", email="landlord@example.com", first_name="Dana", last_name="Reyes")
    db.add(user)
    db.commit()
    return user

@pytest.fixture
def sample_property_data():
    """Sample property data for testing."""
    return {
        "title": "Sunny Craftsman Bungalow",
        "address": "1208 Elm Street",
        "city": "Austin",
        "state": "TX",
        "zip": "78704",
        "number_of_bedrooms": 2,
        "number_of_bathrooms": 1.5,
        "square_footage": 1100,
        "rent": 2150.0,
        "description": "Renovated kitchen, shaded back yard and original hardwood floors.",
        "amenities": ["Dishwasher", "Washer/Dryer", "Parking"],
        "photos": ["https://example.com/p/1.jpg"],
        "property_type": "house",
        "pet_friendly": True,
        "utilities_included": False,
    }

@pytest.fixture
def sample_property(db, sample_user, sample_property_data):
    prop = Property(id="prop-1", user_id=sample_user.id, **sample_property_data)
    db.add(prop)
    db.commit()
    return prop

@pytest.fixture
def sample_listing(db, sample_property):
    listing = Listing(
        id="listing-1",
        listing_text="Bright bungalow close to downtown.",
        property_id=sample_property.id,
        user_id=sample_property.user_id,
    )
    db.add(listing)
    db.commit()
    return listing
