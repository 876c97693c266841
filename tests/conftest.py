# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from schednet_infra.db.base import Base
import schednet_infra.db.models  # noqa
from schednet_infra.services import build_service_graph


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def services(session):
    return build_service_graph(session, max_retries=3, timeout_seconds=None).as_dict()


@pytest.fixture
def schedule(services):
    return services["schedule_service"].create_schedule("Test Schedule")
