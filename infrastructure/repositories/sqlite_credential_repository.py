import sqlite3
import logging
from datetime import datetime
from typing import Optional, Tuple

log = logging.getLogger(__name__)


class SQLiteCredentialRepository:
    """Durable holder of the admin session triple (token, identity, credential).

    Rows are keyed by API origin and by the opaque key of the browser that
    logged in, so a visitor without that browser's key never sees the row.
    Without a browser key nothing is read or persisted.

    Reads and writes are synchronous. The triple is always written and deleted
    as one row so a partially stored session can never be read back.
    """

    def __init__(self, db_path: str, origin: str, browser_key: Optional[str] = None):
        self.db_path = db_path
        self.origin = origin
        self.browser_key = browser_key or None

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def _get_current_version(self, conn) -> int:
        row = conn.execute("SELECT version FROM schema_info").fetchone()
        if row:
            return row[0]
        return 0

    def _migrate_v1(self, conn):
        """Baseline schema (v1)."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS stored_sessions (
                origin TEXT PRIMARY KEY,
                access_token TEXT NOT NULL,
                identity TEXT NOT NULL,
                credential TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _migrate_v2(self, conn):
        """Operator action trail, written by SQLiteAuditRepository."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS audit_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                ts TEXT NOT NULL,
                actor TEXT,
                action TEXT NOT NULL,
                target_type TEXT NOT NULL,
                target_id TEXT,
                metadata_json TEXT,
                result TEXT NOT NULL
            )
        """)

    def _migrate_v3(self, conn):
        """Key stored sessions by (origin, browser_key).

        v1 rows belong to no browser, so they are dropped rather than carried over.
        """
        conn.execute("DROP TABLE IF EXISTS stored_sessions")
        conn.execute("""
            CREATE TABLE stored_sessions (
                origin TEXT NOT NULL,
                browser_key TEXT NOT NULL,
                access_token TEXT NOT NULL,
                identity TEXT NOT NULL,
                credential TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (origin, browser_key)
            )
        """)

    def init_db(self):
        migrations = [self._migrate_v1, self._migrate_v2, self._migrate_v3]

        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_info (
                    version INTEGER NOT NULL
                )
            """)
            current_version = self._get_current_version(conn)
            has_version_row = conn.execute("SELECT COUNT(*) FROM schema_info").fetchone()[0] > 0
            if not has_version_row:
                conn.execute("INSERT INTO schema_info (version) VALUES (?)", (current_version,))

            for i in range(current_version, len(migrations)):
                target_version = i + 1
                try:
                    migrations[i](conn)
                    conn.execute("UPDATE schema_info SET version = ?", (target_version,))
                except Exception as e:
                    raise RuntimeError(f"Database migration to v{target_version} failed: {e}") from e

            conn.commit()

    def load(self) -> Optional[Tuple[str, str, str]]:
        """Return (access_token, identity, credential) for this origin and browser, or None."""
        if not self.browser_key:
            return None
        with self._conn() as conn:
            row = conn.execute(
                "SELECT access_token, identity, credential FROM stored_sessions WHERE origin = ? AND browser_key = ?",
                (self.origin, self.browser_key),
            ).fetchone()
        if not row or not all(row):
            return None
        return row[0], row[1], row[2]

    def save(self, access_token: str, identity: str, credential: str):
        if not self.browser_key:
            log.warning(f"⚠️ No browser key for {self.origin}; session for {identity} kept in memory only")
            return
        now_iso = datetime.utcnow().isoformat()
        with self._conn() as conn:
            conn.execute("""
                INSERT INTO stored_sessions (origin, browser_key, access_token, identity, credential, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(origin, browser_key) DO UPDATE SET
                access_token = excluded.access_token,
                identity = excluded.identity,
                credential = excluded.credential,
                updated_at = excluded.updated_at
            """, (self.origin, self.browser_key, access_token, identity, credential, now_iso))
            conn.commit()

    def update_token(self, access_token: str) -> bool:
        if not self.browser_key:
            return False
        now_iso = datetime.utcnow().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                "UPDATE stored_sessions SET access_token = ?, updated_at = ? WHERE origin = ? AND browser_key = ?",
                (access_token, now_iso, self.origin, self.browser_key),
            )
            conn.commit()
            return cur.rowcount > 0

    def clear(self):
        if not self.browser_key:
            return
        with self._conn() as conn:
            conn.execute(
                "DELETE FROM stored_sessions WHERE origin = ? AND browser_key = ?",
                (self.origin, self.browser_key),
            )
            conn.commit()
        log.info(f"Stored session cleared for {self.origin}")
