# tests/test_migrations.py
"""The Alembic history must build the same schema as the ORM metadata."""

from alembic import command
from sqlalchemy import create_engine, inspect

from gyansetu.db.session import Base
from gyansetu.scripts.migrate import build_config


def test_upgrade_head_creates_every_table(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    command.upgrade(build_config(url), "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)

        question_fks = {fk["name"] for fk in inspector.get_foreign_keys("questions")}
        assert "fk_questions_best_answer_id" in question_fks
    finally:
        engine.dispose()


def test_downgrade_to_base(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'roundtrip.db'}"
    cfg = build_config(url)
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
