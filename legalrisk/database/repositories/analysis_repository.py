from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from legalrisk.analysis.models import (
    AnalysisResult,
    Clause,
    ClausePosition,
    ClauseType,
    Priority,
    Recommendation,
    RiskFactor,
    Severity,
)
from legalrisk.database.connection import get_connection
from legalrisk.database.models import AnalysisRecord
from legalrisk.processor.exceptions import PersistenceError
from legalrisk.processor.models import DocumentStatus


class AnalysisRepository:
    """Database operations for analyses and their child tables."""

    def create_analysis(self, document_id: int, result: AnalysisResult) -> AnalysisRecord:
        """Write the analysis, its child rows and the COMPLETED transition in
        one transaction.

        Clause types are coerced to the fixed enumeration again here, so a
        value that slipped past decoding still lands as OTHER.

        Raises:
            PersistenceError: on any database error, or when the document is
                no longer PROCESSING. Nothing is committed in either case.
        """
        clauses = [
            Clause(
                type=ClauseType.coerce(clause.type),
                content=clause.content,
                risk_level=clause.risk_level,
                explanation=clause.explanation,
                suggestions=list(clause.suggestions),
                position=clause.position,
            )
            for clause in result.clauses
        ]
        try:
            with get_connection() as conn:
                with conn.transaction():
                    analysis_id, created_at = self._insert_analysis(conn, document_id, result)
                    self._insert_children(conn, analysis_id, result, clauses)
                    self._complete_document(conn, document_id)
        except PersistenceError:
            raise
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Failed to persist analysis for document {document_id}: {exc}"
            ) from exc

        return AnalysisRecord(
            id=analysis_id,
            document_id=document_id,
            risk_score=result.risk_score,
            overall_summary=result.overall_summary,
            plain_english=result.plain_english,
            key_terms=list(result.key_terms),
            risk_factors=list(result.risk_factors),
            recommendations=list(result.recommendations),
            clauses=clauses,
            created_at=created_at,
        )

    def find_by_document(self, document_id: int) -> AnalysisRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, risk_score, overall_summary,
                           plain_english, key_terms, created_at
                    FROM analyses
                    WHERE document_id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()
                if row is None:
                    return None
                analysis_id = row["id"]

                cur.execute(
                    """
                    SELECT factor, severity, explanation
                    FROM risk_factors WHERE analysis_id = %s ORDER BY position
                    """,
                    (analysis_id,),
                )
                risk_rows = cur.fetchall()
                cur.execute(
                    """
                    SELECT category, suggestion, priority
                    FROM recommendations WHERE analysis_id = %s ORDER BY position
                    """,
                    (analysis_id,),
                )
                recommendation_rows = cur.fetchall()
                cur.execute(
                    """
                    SELECT type, content, risk_level, explanation, suggestions, location
                    FROM clauses WHERE analysis_id = %s ORDER BY position
                    """,
                    (analysis_id,),
                )
                clause_rows = cur.fetchall()

        return AnalysisRecord(
            id=analysis_id,
            document_id=row["document_id"],
            risk_score=row["risk_score"],
            overall_summary=row["overall_summary"],
            plain_english=row["plain_english"],
            key_terms=list(row["key_terms"] or []),
            risk_factors=[
                RiskFactor(
                    factor=r["factor"],
                    severity=Severity(r["severity"]),
                    explanation=r["explanation"],
                )
                for r in risk_rows
            ],
            recommendations=[
                Recommendation(
                    category=r["category"],
                    suggestion=r["suggestion"],
                    priority=Priority(r["priority"]),
                )
                for r in recommendation_rows
            ],
            clauses=[self._row_to_clause(r) for r in clause_rows],
            created_at=row["created_at"],
        )

    @staticmethod
    def _insert_analysis(
        conn: psycopg.Connection[Any], document_id: int, result: AnalysisResult
    ) -> tuple[int, Any]:
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO analyses
                    (document_id, risk_score, overall_summary, plain_english, key_terms)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING id, created_at
                """,
                (
                    document_id,
                    result.risk_score,
                    result.overall_summary,
                    result.plain_english,
                    Jsonb(list(result.key_terms)),
                ),
            )
            row = cur.fetchone()
        if row is None:
            raise PersistenceError("INSERT INTO analyses returned no row")
        return row[0], row[1]

    @staticmethod
    def _insert_children(
        conn: psycopg.Connection[Any],
        analysis_id: int,
        result: AnalysisResult,
        clauses: list[Clause],
    ) -> None:
        with conn.cursor() as cur:
            if result.risk_factors:
                cur.executemany(
                    """
                    INSERT INTO risk_factors
                        (analysis_id, position, factor, severity, explanation)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    [
                        (analysis_id, i, rf.factor, rf.severity.value, rf.explanation)
                        for i, rf in enumerate(result.risk_factors)
                    ],
                )
            if result.recommendations:
                cur.executemany(
                    """
                    INSERT INTO recommendations
                        (analysis_id, position, category, suggestion, priority)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    [
                        (analysis_id, i, rec.category, rec.suggestion, rec.priority.value)
                        for i, rec in enumerate(result.recommendations)
                    ],
                )
            if clauses:
                cur.executemany(
                    """
                    INSERT INTO clauses
                        (analysis_id, position, type, content, risk_level,
                         explanation, suggestions, location)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    [
                        (
                            analysis_id,
                            i,
                            clause.type.value,
                            clause.content,
                            clause.risk_level.value,
                            clause.explanation,
                            Jsonb(list(clause.suggestions)),
                            Jsonb(
                                {
                                    "page": clause.position.page,
                                    "section": clause.position.section,
                                }
                            ),
                        )
                        for i, clause in enumerate(clauses)
                    ],
                )

    @staticmethod
    def _complete_document(conn: psycopg.Connection[Any], document_id: int) -> None:
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE documents
                SET status = %s, updated_at = NOW()
                WHERE id = %s AND status = %s
                """,
                (
                    DocumentStatus.COMPLETED.value,
                    document_id,
                    DocumentStatus.PROCESSING.value,
                ),
            )
            if cur.rowcount != 1:
                raise PersistenceError(
                    f"Document {document_id} is not PROCESSING; analysis not saved"
                )

    @staticmethod
    def _row_to_clause(row: dict[str, Any]) -> Clause:
        location = row["location"] or {}
        return Clause(
            type=ClauseType.coerce(row["type"]),
            content=row["content"],
            risk_level=Severity(row["risk_level"]),
            explanation=row["explanation"],
            suggestions=list(row["suggestions"] or []),
            position=ClausePosition(
                page=int(location.get("page", 0)),
                section=str(location.get("section", "N/A")),
            ),
        )
