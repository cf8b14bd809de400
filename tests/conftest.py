# /tests/conftest.py

import pytest
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.db.database import build_engine
from app.services.database_service import DatabaseService


@pytest.fixture(autouse=True)
def test_environment(tmp_path, monkeypatch):
    """
    Points object storage at a temporary directory and provides a dummy API
    key, so no test ever touches the real storage root or a real model.
    """
    storage_root = tmp_path / "storage"
    storage_root.mkdir()
    monkeypatch.setenv("STORAGE_ROOT", str(storage_root))
    monkeypatch.setenv("PUBLIC_FILES_BASE_URL", "http://testserver/files")
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
    return storage_root


@pytest.fixture
def db_engine(tmp_path):
    """A fresh, file-backed SQLite database with every table created."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def db_service(db_session):
    return DatabaseService(db_session)


@pytest.fixture
def mock_generate_text(mocker):
    """Replaces the text model call; set `.return_value` or `.side_effect` per test."""
    return mocker.patch("app.services.gemini_service.generate_text", new_callable=mocker.AsyncMock)


@pytest.fixture
def mock_generate_multimodal(mocker):
    """Replaces the vision model call used for OCR."""
    return mocker.patch("app.services.gemini_service.generate_multimodal_response", new_callable=mocker.AsyncMock)
