import sqlite3
from datetime import datetime
from typing import Any

from src.domain.entities import BankEntry, Pool, PoolMember, Route


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteRepoBase:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteRouteRepo(SQLiteRepoBase):
    def save(self, route: Route) -> Route:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO routes (
                    id, vessel_type, fuel_type, year, ghg_intensity,
                    fuel_consumption, distance, is_baseline
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    vessel_type=excluded.vessel_type,
                    fuel_type=excluded.fuel_type,
                    year=excluded.year,
                    ghg_intensity=excluded.ghg_intensity,
                    fuel_consumption=excluded.fuel_consumption,
                    distance=excluded.distance,
                    is_baseline=excluded.is_baseline
            """,
                (
                    route.id,
                    route.vessel_type,
                    route.fuel_type,
                    route.year,
                    route.ghg_intensity,
                    route.fuel_consumption,
                    route.distance,
                    1 if route.is_baseline else 0,
                ),
            )
            conn.commit()
            return route
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, route_id: str) -> Route | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM routes WHERE id = ?", (route_id,)).fetchone()
            return self._to_route(row) if row else None
        finally:
            conn.close()

    def list_all(self) -> list[Route]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM routes ORDER BY rowid ASC").fetchall()
            return [self._to_route(row) for row in rows]
        finally:
            conn.close()

    def _to_route(self, row: dict[str, Any]) -> Route:
        return Route(
            id=row["id"],
            vessel_type=row["vessel_type"],
            fuel_type=row["fuel_type"],
            year=row["year"],
            ghg_intensity=row["ghg_intensity"],
            fuel_consumption=row["fuel_consumption"],
            distance=row["distance"],
            is_baseline=bool(row["is_baseline"]),
        )


class SQLiteLedgerRepo(SQLiteRepoBase):
    _UPSERT = """
        INSERT INTO bank_entries (id, route_id, year, amount, applied_year)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            applied_year=excluded.applied_year
    """

    def get_entries(self, route_id: str, year: int | None = None) -> list[BankEntry]:
        conn = self._get_conn()
        try:
            query = "SELECT * FROM bank_entries WHERE route_id = ?"
            params: list[str | int] = [route_id]
            if year is not None:
                query += " AND year = ?"
                params.append(year)
            query += " ORDER BY rowid ASC"
            rows = conn.execute(query, params).fetchall()
            return [
                BankEntry(
                    id=row["id"],
                    route_id=row["route_id"],
                    year=row["year"],
                    amount=row["amount"],
                    applied_year=row["applied_year"],
                )
                for row in rows
            ]
        finally:
            conn.close()

    def save_entry(self, entry: BankEntry) -> BankEntry:
        self.save_entries([entry])
        return entry

    def save_entries(self, entries: list[BankEntry]) -> list[BankEntry]:
        # amount is immutable after creation, so the upsert only moves applied_year
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            conn.executemany(
                self._UPSERT,
                [(e.id, e.route_id, e.year, e.amount, e.applied_year) for e in entries],
            )
            conn.commit()
            return entries
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


class SQLitePoolRepo(SQLiteRepoBase):
    def save_pool(self, pool: Pool) -> Pool:
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            conn.execute(
                "INSERT INTO pools (id, name, year, created_at) VALUES (?, ?, ?, ?)",
                (pool.id, pool.name, pool.year, pool.created_at.isoformat()),
            )
            conn.executemany(
                """
                INSERT INTO pool_members
                (pool_id, position, route_id, initial_cb, adjusted_cb, allocation_used)
                VALUES (?, ?, ?, ?, ?, ?)
            """,
                [
                    (pool.id, i, m.route_id, m.initial_cb, m.adjusted_cb, m.allocation_used)
                    for i, m in enumerate(pool.members)
                ],
            )
            conn.commit()
            return pool
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_by_year(self, year: int) -> list[Pool]:
        conn = self._get_conn()
        try:
            pool_rows = conn.execute(
                "SELECT * FROM pools WHERE year = ? ORDER BY created_at ASC, rowid ASC",
                (year,),
            ).fetchall()

            pools = []
            for p_row in pool_rows:
                member_rows = conn.execute(
                    "SELECT * FROM pool_members WHERE pool_id = ? ORDER BY position ASC",
                    (p_row["id"],),
                ).fetchall()
                pools.append(
                    Pool(
                        id=p_row["id"],
                        name=p_row["name"],
                        year=p_row["year"],
                        created_at=datetime.fromisoformat(p_row["created_at"]),
                        members=[
                            PoolMember(
                                route_id=m["route_id"],
                                initial_cb=m["initial_cb"],
                                adjusted_cb=m["adjusted_cb"],
                                allocation_used=m["allocation_used"],
                            )
                            for m in member_rows
                        ],
                    )
                )
            return pools
        finally:
            conn.close()
