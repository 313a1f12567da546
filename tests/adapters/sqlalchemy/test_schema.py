from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, inspect

from account_opening.adapters.sqlalchemy import mapper_registry, start_mappers

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _columns(engine: Engine) -> dict[str, set[str]]:
    inspector = inspect(engine)
    return {
        table: {column["name"] for column in inspector.get_columns(table)}
        for table in inspector.get_table_names()
        if table != "alembic_version"
    }


def test_migrations_match_mapped_metadata(sqlite_engine: Engine) -> None:
    reference = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    mapper_registry.metadata.create_all(reference)

    assert _columns(sqlite_engine) == _columns(reference)
    assert set(_columns(sqlite_engine)) == set(mapper_registry.metadata.tables)


def test_identity_number_lookup_is_indexed(sqlite_engine: Engine) -> None:
    indexes = inspect(sqlite_engine).get_indexes("personal_profile")

    assert any(index["column_names"] == ["identity_number"] for index in indexes)
