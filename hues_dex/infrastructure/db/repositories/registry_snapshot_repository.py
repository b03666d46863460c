from __future__ import annotations

import logging

from sqlalchemy import insert, text

from hues_dex.application.ports.system_state_port import RegistrySnapshotPort
from hues_dex.infrastructure.db.engine import Base
from hues_dex.infrastructure.db.models.registry_snapshot import RegistrySnapshotModel


logger = logging.getLogger(__name__)


class SqlRegistrySnapshotRepository(RegistrySnapshotPort):
    def __init__(self, engine):
        self._engine = engine

    def ensure_schema(self) -> None:
        Base.metadata.create_all(self._engine, tables=[RegistrySnapshotModel.__table__])

    def save_snapshot(self, *, payload: str, created_at_ms: int) -> int:
        stmt = insert(RegistrySnapshotModel).values(payload=payload, created_at_ms=created_at_ms)
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
            snapshot_id = int(result.inserted_primary_key[0])
        logger.info(
            "registry_snapshot_repository: saved id=%s bytes=%s",
            snapshot_id,
            len(payload),
        )
        return snapshot_id

    def load_latest_snapshot(self) -> str | None:
        sql = """
            SELECT payload
            FROM registry_snapshots
            ORDER BY created_at_ms DESC, id DESC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql)).mappings().first()
        if row is None:
            return None
        return row["payload"]
