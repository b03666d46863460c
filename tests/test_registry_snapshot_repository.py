from __future__ import annotations

import pytest
from sqlalchemy import create_engine

from hues_dex.infrastructure.db.repositories.registry_snapshot_repository import (
    SqlRegistrySnapshotRepository,
)


@pytest.fixture
def repository() -> SqlRegistrySnapshotRepository:
    repo = SqlRegistrySnapshotRepository(create_engine("sqlite:///:memory:"))
    repo.ensure_schema()
    return repo


def test_empty_store_has_no_snapshot(repository):
    assert repository.load_latest_snapshot() is None


def test_latest_snapshot_wins(repository):
    first = repository.save_snapshot(payload='{"pools": []}', created_at_ms=1_000)
    second = repository.save_snapshot(payload='{"pools": [1]}', created_at_ms=2_000)
    repository.save_snapshot(payload='{"pools": [0]}', created_at_ms=500)

    assert second > first
    assert repository.load_latest_snapshot() == '{"pools": [1]}'


def test_ensure_schema_is_idempotent(repository):
    repository.ensure_schema()
    repository.save_snapshot(payload="{}", created_at_ms=1)
    assert repository.load_latest_snapshot() == "{}"
