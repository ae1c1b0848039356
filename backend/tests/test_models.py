from studyflow.db.base import Base
from studyflow.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_core_tables() -> None:
    table_names = set(Base.metadata.tables.keys())

    assert {"users", "routines", "ai_analysis", "study_sessions", "weekly_progress"} <= table_names


def test_child_rows_reference_routines_with_set_null() -> None:
    for table_name in ("ai_analysis", "study_sessions"):
        fk = next(
            fk for fk in Base.metadata.tables[table_name].foreign_keys if fk.column.table.name == "routines"
        )
        assert fk.ondelete == "SET NULL"


def test_analysis_type_constraint_lists_every_kind() -> None:
    from studyflow.db.models.ai_analysis import ANALYSIS_TYPES

    check = next(
        constraint
        for constraint in Base.metadata.tables["ai_analysis"].constraints
        if constraint.name == "ck_ai_analysis_type"
    )
    for kind in ANALYSIS_TYPES:
        assert f"'{kind}'" in str(check.sqltext)
