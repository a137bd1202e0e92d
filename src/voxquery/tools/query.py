"""SQL query tool exposed to the chat agent.

Statements are checked against a leading-keyword allow-list, executed on a
dedicated connection and rendered into a short summary the model can relay
to the user. Every failure is returned as text; nothing is raised.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Any

import sqlglot
from sqlglot.errors import SqlglotError
from sqlalchemy.exc import DBAPIError

from voxquery.db.connect import get_connection
from voxquery.logging import get_logger
from voxquery.tools.results import ToolResult


logger = get_logger(__name__)

TOOL_NAME = "run_mysql_query"

ALLOWED_PREFIXES = ("select", "describe", "insert", "show")

FULL_RENDER_LIMIT = 10
SAMPLE_SIZE = 5

REFUSAL_MESSAGE = "Only SELECT, DESCRIBE, INSERT and SHOW queries are allowed for security reasons."
MULTI_STATEMENT_MESSAGE = "Only a single SQL statement can be executed per call."
NO_ROWS_AFFECTED_MESSAGE = "Query executed successfully but no rows were affected."
NO_RESULTS_MESSAGE = (
    "Query executed successfully but returned no results. "
    "The table might be empty or your conditions did not match any records."
)
TABLE_NOT_FOUND_MESSAGE = (
    "Table not found. Please check the table name. "
    "Available tables might include: games, cards etc."
)
COLUMN_NOT_FOUND_MESSAGE = (
    "Column not found. Please check your column names. "
    "Use DESCRIBE tablename to see available columns."
)

# MySQL server error codes
_ER_NO_SUCH_TABLE = 1146
_ER_BAD_FIELD_ERROR = 1054


def _is_truthy(value: str | None, *, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _single_statement_required() -> bool:
    return _is_truthy(os.getenv("VOXQUERY_SQL_SINGLE_STATEMENT"), default=True)


def _sql_dialect() -> str | None:
    raw = (os.getenv("VOXQUERY_SQL_DIALECT") or "mysql").strip()
    return raw or None


def is_allowed_statement(statement: str) -> bool:
    """Return ``True`` when the trimmed statement starts with an allowed verb.

    This is a prefix match on the lowercased text, not a parse; it does not
    stop comment tricks or stacked statements on its own.
    """

    lowered = (statement or "").strip().lower()
    return lowered.startswith(ALLOWED_PREFIXES)


def count_statements(statement: str) -> int | None:
    """Count SQL statements in ``statement``; ``None`` when it cannot be parsed."""

    try:
        parsed = sqlglot.parse(statement, read=_sql_dialect())
    except (SqlglotError, ValueError):
        return None
    return sum(1 for expression in parsed if expression is not None)


def format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def format_row(index: int, row: Mapping[str, Any]) -> str:
    """Render ``row`` as ``Row <index>: {col: val, ...}`` (``index`` is 1-based)."""

    fields = ", ".join(f"{key}: {format_value(value)}" for key, value in row.items())
    return f"Row {index}: {{{fields}}}"


def format_rows(rows: Sequence[Mapping[str, Any]]) -> str:
    """Summarize a fetched result set.

    Up to ten rows are rendered in full. Larger results show the first five
    rows and a count of the rest; the full set has already been fetched.
    """

    total = len(rows)
    if total == 0:
        return NO_RESULTS_MESSAGE

    if total <= FULL_RENDER_LIMIT:
        body = "\n".join(format_row(idx, row) for idx, row in enumerate(rows, start=1))
        return f"Found {total} record(s):\n{body}"

    sample = "\n".join(format_row(idx, row) for idx, row in enumerate(rows[:SAMPLE_SIZE], start=1))
    return (
        f"Found {total} record(s). Showing first {SAMPLE_SIZE}:\n"
        f"{sample}\n... and {total - SAMPLE_SIZE} more records."
    )


def format_insert(affected_rows: int, insert_id: Any) -> str:
    if affected_rows > 0:
        return (
            f"Query executed successfully. {affected_rows} row(s) affected. "
            f"Insert ID: {format_value(insert_id)}"
        )
    return NO_ROWS_AFFECTED_MESSAGE


def _error_code(exc: BaseException) -> int | None:
    orig = getattr(exc, "orig", None)
    args = getattr(orig, "args", None) or ()
    if args and isinstance(args[0], int):
        return args[0]
    return None


def _error_text(exc: BaseException) -> str:
    orig = getattr(exc, "orig", None)
    if orig is not None:
        args = getattr(orig, "args", None) or ()
        # pymysql errors carry (code, message)
        if len(args) >= 2 and isinstance(args[0], int):
            return str(args[1])
        return str(orig)
    return str(exc)


def classify_error(exc: BaseException) -> tuple[str, str]:
    """Map a database exception to ``(kind, message)``."""

    code = _error_code(exc)
    detail = _error_text(exc)
    lowered = detail.lower()

    if code == _ER_NO_SUCH_TABLE or "no such table" in lowered:
        return "table_not_found", TABLE_NOT_FOUND_MESSAGE
    if (
        code == _ER_BAD_FIELD_ERROR
        or "no such column" in lowered
        or "unknown column" in lowered
    ):
        return "column_not_found", COLUMN_NOT_FOUND_MESSAGE
    return "database_error", f"Database error: {detail}. Please check your SQL syntax."


def run_query(statement: str, *, db_url: str | None = None) -> ToolResult:
    """Validate and execute one statement, returning a :class:`ToolResult`."""

    clean = (statement or "").strip()
    if not is_allowed_statement(clean):
        logger.info("Rejected statement with disallowed verb: %.80s", clean)
        return ToolResult(tool=TOOL_NAME, status="error", kind="rejected", message=REFUSAL_MESSAGE)

    if _single_statement_required():
        statements = count_statements(clean)
        if statements is not None and statements > 1:
            logger.warning("Rejected multi-statement query (%s statements)", statements)
            return ToolResult(
                tool=TOOL_NAME,
                status="error",
                kind="multi_statement",
                message=MULTI_STATEMENT_MESSAGE,
            )

    is_insert = clean.lower().startswith("insert")
    try:
        with get_connection(db_url) as connection:
            logger.info("Executing query: %s", clean)
            result = connection.exec_driver_sql(clean, execution_options={"no_parameters": True})

            if is_insert:
                affected = int(result.rowcount or 0)
                insert_id = result.lastrowid
                connection.commit()
                return ToolResult(
                    tool=TOOL_NAME,
                    status="ok" if affected > 0 else "empty",
                    kind=None if affected > 0 else "no_rows_affected",
                    message=format_insert(affected, insert_id),
                    data={"affected_rows": affected, "insert_id": insert_id},
                )

            rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
    except DBAPIError as exc:
        logger.warning("Database query error: %s", exc)
        kind, message = classify_error(exc)
        return ToolResult(tool=TOOL_NAME, status="error", kind=kind, message=message)
    except Exception as exc:
        logger.exception("Database query error")
        return ToolResult(
            tool=TOOL_NAME,
            status="error",
            kind="database_error",
            message=f"Database error: {exc}. Please check your SQL syntax.",
        )

    if not rows:
        return ToolResult(tool=TOOL_NAME, status="empty", kind="no_results", message=NO_RESULTS_MESSAGE)

    return ToolResult(
        tool=TOOL_NAME,
        status="ok",
        message=format_rows(rows),
        data={"row_count": len(rows)},
    )


def execute(statement: str, *, db_url: str | None = None) -> str:
    """Run ``statement`` and return the rendered text for the agent."""

    return run_query(statement, db_url=db_url).message
