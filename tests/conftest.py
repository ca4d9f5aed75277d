"""Shared pytest fixtures for all tests."""

import io

import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from docserver.blob_storage import BlobStore
from docserver.database import Database
from docserver.main import create_app
from docserver.services.file_service import FileService
from docserver.services.folder_service import FolderService


@pytest.fixture
def db(tmp_path):
    """
    Create a fresh SQLite database file for each test.

    A file is used instead of :memory: because every connection to
    :memory: opens a separate empty database.
    """
    database = Database(str(tmp_path / "askdoc.db"))
    database.init_schema()
    return database


@pytest.fixture
def blob_store(tmp_path):
    store = BlobStore(tmp_path / "uploads")
    store.ensure_directory()
    return store


@pytest.fixture
def folder_service(db, blob_store):
    return FolderService(db, blob_store)


@pytest.fixture
def file_service(db, blob_store):
    return FileService(db, blob_store, max_upload_bytes=1024 * 1024)


@pytest.fixture
def store_file(file_service, blob_store):
    """
    Write a blob and record it, returning the File.

    Usage: store_file("report.pdf", b"...", folder_id=3, namespace="mine")
    """
    counter = {"n": 0}

    def _store(display_name, data=b"content", folder_id=None, namespace="mine", content_type="text/plain"):
        counter["n"] += 1
        stored_name = f"{counter['n']}-{display_name}"
        path, size = blob_store.write(stored_name, io.BytesIO(data), 1024 * 1024)
        return file_service.create_file(
            display_name=display_name,
            blob_path=path,
            size_bytes=size,
            content_type=content_type,
            folder_id=folder_id,
            namespace=namespace,
            stored_name=stored_name,
        )

    return _store


@pytest.fixture
def api_client(tmp_path):
    """
    TestClient for an app bound to a temporary database and uploads directory.

    The context manager runs the startup event, which creates the schema.
    """
    app = create_app(
        database_path=str(tmp_path / "api.db"),
        uploads_dir=str(tmp_path / "api-uploads"),
        max_upload_bytes=1024,
        seed_defaults=False,
    )
    with TestClient(app) as client:
        yield client


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .askdoc directory
    """
    config_dir = tmp_path / '.askdoc'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path
