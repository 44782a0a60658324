"""
Notemail Backend — Migration Tests
==================================

What:  Checks that Alembic revision 001 still creates the same trigger the
       ORM metadata attaches to `create_all`.
"""

import importlib.util
from pathlib import Path

import pytest

from notemail.models import note as note_model

REVISION_001 = (
    Path(__file__).resolve().parent.parent
    / "alembic"
    / "versions"
    / "001_create_notes_table.py"
)


def _load_revision():
    spec = importlib.util.spec_from_file_location("revision_001", REVISION_001)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _normalized(sql: str) -> str:
    return " ".join(sql.split())


class TestRevision001:

    @pytest.mark.parametrize(
        "name", ["UPDATE_TIMESTAMP_FUNCTION", "UPDATE_TIMESTAMP_TRIGGER"]
    )
    def test_trigger_ddl_matches_model(self, name):
        revision = _load_revision()

        assert _normalized(getattr(revision, name)) == _normalized(
            getattr(note_model, name)
        )

    def test_revision_identifiers(self):
        revision = _load_revision()

        assert revision.revision == "001"
        assert revision.down_revision is None
