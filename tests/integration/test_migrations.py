"""The initial migration builds the same schema as the models."""

import importlib.util
from pathlib import Path

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from scribexx.kernel.models import Base

VERSIONS_DIR = Path(__file__).resolve().parents[2] / "alembic" / "versions"


def _load_initial_migration():
    path = VERSIONS_DIR / "20261017_0001_initial_schema.py"
    module_spec = importlib.util.spec_from_file_location("initial_schema", path)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def _run(step: str) -> sa.Engine:
    engine = sa.create_engine("sqlite://")
    migration = _load_initial_migration()
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            migration.upgrade()
            if step == "downgrade":
                migration.downgrade()
    return engine


class TestInitialMigration:

    def test_is_the_first_revision(self):
        migration = _load_initial_migration()
        assert migration.revision == "0001"
        assert migration.down_revision is None

    def test_upgrade_creates_every_model_table(self):
        engine = _run("upgrade")
        inspector = sa.inspect(engine)

        assert set(inspector.get_table_names()) == set(Base.metadata.tables)

    def test_columns_match_models(self):
        engine = _run("upgrade")
        inspector = sa.inspect(engine)

        for name, table in Base.metadata.tables.items():
            migrated = {column["name"] for column in inspector.get_columns(name)}
            assert migrated == set(table.columns.keys()), name

    def test_composite_indexes_and_link_uniqueness(self):
        engine = _run("upgrade")
        inspector = sa.inspect(engine)

        event_indexes = {index["name"] for index in inspector.get_indexes("event_logs")}
        assert {"ix_event_logs_entity", "ix_event_logs_user_time"} <= event_indexes
        attempt_indexes = {index["name"] for index in inspector.get_indexes("exercise_attempts")}
        assert "ix_exercise_attempts_user_exercise" in attempt_indexes
        uniques = {c["name"] for c in inspector.get_unique_constraints("student_links")}
        assert "uq_student_links_guardian_student" in uniques

    def test_downgrade_drops_everything(self):
        engine = _run("downgrade")
        assert sa.inspect(engine).get_table_names() == []
