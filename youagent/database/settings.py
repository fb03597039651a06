"""Consent and key/value settings (SQLite).

Consent gates which connectors may run; settings hold small values captured
during `youagent init` (for example the GitHub username).
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from youagent.models import Consent


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SettingsDB:
    """SQLite wrapper for consent and settings tables."""

    def __init__(self, db_path: Path) -> None:
        self._path = Path(db_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def init_db(self) -> None:
        """Create consent and settings tables if they do not exist."""
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS consent (
                    source TEXT PRIMARY KEY,
                    granted INTEGER NOT NULL DEFAULT 0,
                    granted_at TEXT,
                    revoked_at TEXT
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    # ---- Consent ----

    def grant(self, source: str) -> None:
        """Grant consent for a source (re-granting clears revoked_at)."""
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                """
                INSERT INTO consent (source, granted, granted_at, revoked_at)
                VALUES (?, 1, ?, NULL)
                ON CONFLICT(source) DO UPDATE SET
                    granted = 1, granted_at = excluded.granted_at, revoked_at = NULL
                """,
                (source, _now_iso()),
            )
            conn.commit()

    def revoke(self, source: str) -> None:
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                "UPDATE consent SET granted = 0, revoked_at = ? WHERE source = ?",
                (_now_iso(), source),
            )
            conn.commit()

    def is_granted(self, source: str) -> bool:
        with sqlite3.connect(self._path) as conn:
            row = conn.execute(
                "SELECT granted FROM consent WHERE source = ?", (source,)
            ).fetchone()
        return bool(row and row[0])

    def list_consent(self) -> list[Consent]:
        with sqlite3.connect(self._path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute("SELECT * FROM consent ORDER BY source").fetchall()
        return [
            Consent(
                source=r["source"],
                granted=bool(r["granted"]),
                granted_at=r["granted_at"],
                revoked_at=r["revoked_at"],
            )
            for r in rows
        ]

    # ---- Settings ----

    def get(self, key: str) -> Optional[str]:
        with sqlite3.connect(self._path) as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, _now_iso()),
            )
            conn.commit()

    def delete(self, key: str) -> None:
        with sqlite3.connect(self._path) as conn:
            conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            conn.commit()
