import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from sportfitx.auth import jwt_handler  # noqa: E402
from sportfitx.database import Base  # noqa: E402
from sportfitx.main import app  # noqa: E402
from sportfitx.models.document import Document  # noqa: E402
from sportfitx.repository import DocumentStore  # noqa: E402


@pytest.fixture
def store():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Document.__table__])
    try:
        yield DocumentStore(testing_session_local)
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Document.__table__])
        engine.dispose()


@pytest.fixture
def file_store(tmp_path):
    # One connection per thread, so concurrent writers really race each other.
    engine = create_engine(
        f'sqlite:///{tmp_path / "documents.db"}',
        connect_args={'check_same_thread': False, 'timeout': 30},
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Document.__table__])
    try:
        yield DocumentStore(testing_session_local)
    finally:
        engine.dispose()


@pytest.fixture
def client(store):
    app.state.store = store
    yield TestClient(app)
    del app.state.store


@pytest.fixture
def auth_headers():
    def build(email: str) -> dict:
        token = jwt_handler.create_access_token({'email': email})
        return {'Authorization': f'Bearer {token}'}

    return build
