from alembic.script import ScriptDirectory

from campus_bracket.utils.alembic import get_alembic_config, get_head_revision


def test_migrations_form_a_single_chain() -> None:
    script_directory = ScriptDirectory.from_config(get_alembic_config())

    assert script_directory.get_heads() == ["8a3f6d2e4b17"]
    assert [revision.revision for revision in script_directory.walk_revisions()] == [
        "8a3f6d2e4b17",
        "5e2b7c1d9a40",
    ]


def test_head_revision_adds_settings_and_join_requests() -> None:
    assert get_head_revision() == "8a3f6d2e4b17"
