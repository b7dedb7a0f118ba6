import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from legalrisk.config.settings import Settings
from legalrisk.database.connection import close_pool, get_connection, init_pool
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.processor.models import Document

SCHEMA_PATH = Path(__file__).parents[2] / "legalrisk" / "database" / "schema.sql"
TEST_OWNER_ID = 424242


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "legalrisk_test")
    return Settings(
        analysis_provider="example",
        embedding_provider="example",
        embedding_dimensions=64,
        vector_index_backend="memory",
        worker_pool_size=2,
        side_task_timeout_seconds=10,
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. Set DB_* env to a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture(autouse=True)
def integration_cleanup(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    yield
    if "integration_pool" not in request.fixturenames:
        return
    with get_connection() as conn:
        conn.execute("DELETE FROM documents WHERE owner_id = %s", (TEST_OWNER_ID,))
        conn.commit()


@pytest.fixture
def owner_id() -> int:
    return TEST_OWNER_ID


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def seed_document(integration_pool: None) -> Document:
    return DocumentRepository().create_document(
        owner_id=TEST_OWNER_ID,
        original_filename="nda.pdf",
        storage_filename="seed.pdf",
        mime_type="application/pdf",
        size_bytes=1024,
    )


@pytest.fixture
def nda_on_disk(seed_document: Document, files_root: Path, nda_pdf_bytes: bytes) -> Document:
    (files_root / seed_document.storage_filename).write_bytes(nda_pdf_bytes)
    return seed_document
