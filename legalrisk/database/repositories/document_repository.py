from typing import Any

from psycopg.rows import dict_row

from legalrisk.database.connection import get_connection
from legalrisk.database.models import AnalysisSummary, DocumentListItem
from legalrisk.processor.models import Document, DocumentStatus

_DOCUMENT_COLUMNS = """
    d.id, d.owner_id, d.original_filename, d.storage_filename,
    d.mime_type, d.size_bytes, d.status, d.created_at
"""

_SUMMARY_COLUMNS = """
    a.id AS analysis_id, a.risk_score, a.overall_summary,
    a.created_at AS analysis_created_at
"""


def _row_to_document(row: dict[str, Any]) -> Document:
    return Document(
        id=row["id"],
        owner_id=row["owner_id"],
        original_filename=row["original_filename"],
        storage_filename=row["storage_filename"],
        mime_type=row["mime_type"],
        size_bytes=row["size_bytes"],
        status=DocumentStatus(row["status"]),
        created_at=row["created_at"],
    )


def _row_to_list_item(row: dict[str, Any]) -> DocumentListItem:
    summary = None
    if row["analysis_id"] is not None:
        summary = AnalysisSummary(
            id=row["analysis_id"],
            risk_score=row["risk_score"],
            overall_summary=row["overall_summary"],
            created_at=row["analysis_created_at"],
        )
    return DocumentListItem(document=_row_to_document(row), analysis=summary)


class DocumentRepository:
    """Database operations for the documents table.

    Status writes are single-row updates. Once a run has claimed a document
    the pipeline owns every further status write.
    """

    def create_document(
        self,
        *,
        owner_id: int,
        original_filename: str,
        storage_filename: str,
        mime_type: str,
        size_bytes: int,
    ) -> Document:
        """Insert a new document in PENDING status."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents AS d
                        (owner_id, original_filename, storage_filename, mime_type,
                         size_bytes, status)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING {_DOCUMENT_COLUMNS}
                    """,
                    (
                        owner_id,
                        original_filename,
                        storage_filename,
                        mime_type,
                        size_bytes,
                        DocumentStatus.PENDING.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO documents returned no row")
        return _row_to_document(row)

    def get_document(self, document_id: int) -> Document | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_DOCUMENT_COLUMNS} FROM documents d WHERE d.id = %s",
                    (document_id,),
                )
                row = cur.fetchone()
        return _row_to_document(row) if row is not None else None

    def find_owned(self, document_id: int, owner_id: int) -> Document | None:
        """Fetch a document only if it belongs to the given owner."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM documents d
                    WHERE d.id = %s AND d.owner_id = %s
                    """,
                    (document_id, owner_id),
                )
                row = cur.fetchone()
        return _row_to_document(row) if row is not None else None

    def find_many_owned(
        self, document_ids: list[int], owner_id: int
    ) -> list[DocumentListItem]:
        """Owner's documents among the given ids, with analysis summaries.
        Ids of other owners or of unknown documents are silently dropped."""
        if not document_ids:
            return []
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}, {_SUMMARY_COLUMNS}
                    FROM documents d
                    LEFT JOIN analyses a ON a.document_id = d.id
                    WHERE d.id = ANY(%s) AND d.owner_id = %s
                    """,
                    (document_ids, owner_id),
                )
                rows = cur.fetchall()
        return [_row_to_list_item(row) for row in rows]

    def claim_for_processing(self, document_id: int) -> bool:
        """Move PENDING -> PROCESSING. Returns False when another run owns the
        document or it has already reached a terminal state."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (
                        DocumentStatus.PROCESSING.value,
                        document_id,
                        DocumentStatus.PENDING.value,
                    ),
                )
                claimed = cur.rowcount == 1
            conn.commit()
        return claimed

    def mark_failed(self, document_id: int) -> bool:
        """Move PROCESSING -> FAILED. A document already in a terminal state is
        left untouched and False is returned."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (
                        DocumentStatus.FAILED.value,
                        document_id,
                        DocumentStatus.PROCESSING.value,
                    ),
                )
                updated = cur.rowcount == 1
            conn.commit()
        return updated

    def list_pending_ids(self, limit: int) -> list[int]:
        """Oldest PENDING documents first."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id FROM documents
                    WHERE status = %s
                    ORDER BY created_at
                    LIMIT %s
                    """,
                    (DocumentStatus.PENDING.value, limit),
                )
                rows = cur.fetchall()
        return [row[0] for row in rows]

    def list_documents(self, owner_id: int) -> list[DocumentListItem]:
        """Owner's documents, newest first, each with its analysis summary."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}, {_SUMMARY_COLUMNS}
                    FROM documents d
                    LEFT JOIN analyses a ON a.document_id = d.id
                    WHERE d.owner_id = %s
                    ORDER BY d.created_at DESC
                    """,
                    (owner_id,),
                )
                rows = cur.fetchall()

        return [_row_to_list_item(row) for row in rows]
