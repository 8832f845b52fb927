from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from bdinvest.domain.portfolio import PortfolioSnapshot


class SnapshotRepository:
    """Keeps portfolio snapshots as JSON rows in a local SQLite file."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                create table if not exists portfolio_snapshots (
                    id integer primary key autoincrement,
                    payload text not null,
                    created_at text not null
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def save(self, snapshot: PortfolioSnapshot) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                insert into portfolio_snapshots (payload, created_at)
                values (?, ?)
                """,
                (
                    snapshot.model_dump_json(),
                    datetime.now(timezone.utc).isoformat(timespec="seconds"),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def load_latest(self) -> Optional[PortfolioSnapshot]:
        conn = self._connect()
        try:
            row = conn.execute(
                """
                select payload
                from portfolio_snapshots
                order by id desc
                limit 1
                """
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return PortfolioSnapshot.model_validate_json(row["payload"])
