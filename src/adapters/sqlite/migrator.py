import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DOWN_MARKER = "-- Down"


@dataclass(frozen=True)
class Migration:
    filename: str
    up_sql: str

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        # Only the part before the Down marker is ever run
        content = path.read_text()
        return cls(filename=path.name, up_sql=content.split(DOWN_MARKER, 1)[0])

    def transactional_script(self) -> str:
        """Up script and its bookkeeping row, committed together or not at all."""
        quoted = self.filename.replace("'", "''")
        return (
            "BEGIN;\n"
            f"{self.up_sql.rstrip().rstrip(';')};\n"
            f"INSERT INTO _migrations (filename) VALUES ('{quoted}');\n"
            "COMMIT;\n"
        )


class SQLiteMigrator:
    """Applies ``migrations/*.sql`` in filename order, each exactly once.

    A migration and its ``_migrations`` row land in the same transaction, so a
    failing script leaves neither its schema changes nor a record behind and is
    retried on the next run.
    """

    def __init__(self, db_path: str, migrations_dir: str):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(
            "CREATE TABLE IF NOT EXISTS _migrations ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " filename TEXT UNIQUE NOT NULL,"
            " applied_at DATETIME DEFAULT CURRENT_TIMESTAMP)"
        )
        conn.commit()
        return conn

    def pending(self, conn: sqlite3.Connection) -> list[Migration]:
        done = {row[0] for row in conn.execute("SELECT filename FROM _migrations")}
        return [
            Migration.from_file(path)
            for path in sorted(self.migrations_dir.glob("*.sql"))
            if path.name not in done
        ]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the filenames applied."""
        conn = self._connect()
        applied_now: list[str] = []
        try:
            for migration in self.pending(conn):
                logger.info("Applying migration: %s", migration.filename)
                try:
                    conn.executescript(migration.transactional_script())
                except sqlite3.Error as e:
                    if conn.in_transaction:
                        conn.rollback()
                    raise RuntimeError(f"Migration {migration.filename} failed: {e}") from e
                applied_now.append(migration.filename)

            logger.info("All migrations applied (%d new).", len(applied_now))
            return applied_now
        finally:
            conn.close()
