import pytest
from pydantic import ValidationError

from actions import (
    can_edit_definition, can_read_definition,
    get_definition_for_user, get_owned_assignment,
)
from auth import require_user
from errors import ActionError
from models import ChallengeDefinition, DailyChallengeAssignment
from schemas import AssignmentUpdate, DefinitionUpdate


def test_can_read_definition():
    assert can_read_definition(None, "u1", False)
    assert can_read_definition("u1", "u1", False)
    assert can_read_definition("u2", "u1", True)
    assert not can_read_definition("u2", "u1", False)


def test_can_edit_definition_owner_or_global():
    assert can_edit_definition("u1", "u1")
    assert can_edit_definition(None, "u1")
    assert not can_edit_definition("u2", "u1")


def test_require_user(context_for, alice):
    assert require_user(context_for(alice)) is alice
    with pytest.raises(ActionError) as exc:
        require_user(context_for(None))
    assert exc.value.code == "UNAUTHORIZED"
    assert exc.value.status_code == 401


def test_definition_update_requires_a_field():
    with pytest.raises(ValidationError):
        DefinitionUpdate(id="abc")

    patch = DefinitionUpdate.model_validate({"id": "abc", "isActive": False})
    assert patch.changes() == {"is_active": False}


def test_patch_rejects_explicit_nulls():
    with pytest.raises(ValidationError):
        DefinitionUpdate.model_validate({"id": "abc", "title": None})
    with pytest.raises(ValidationError):
        DefinitionUpdate.model_validate({"id": "abc", "category": None, "title": "N"})
    with pytest.raises(ValidationError):
        AssignmentUpdate.model_validate({"id": "a1", "rating": None, "status": "completed"})


def test_assignment_update_changes_use_column_names():
    patch = AssignmentUpdate.model_validate({"id": "a1", "status": "completed", "rating": 4})
    assert patch.changes() == {"status": "completed", "rating": 4.0}
    with pytest.raises(ValidationError):
        AssignmentUpdate.model_validate({"id": "a1"})


def test_get_definition_for_user_rules(db_session, alice, bob, system_definition):
    own = ChallengeDefinition(user_id=alice.id, title="Leer", is_system=False)
    shared = ChallengeDefinition(user_id=bob.id, title="Compartido", is_system=True)
    private = ChallengeDefinition(user_id=bob.id, title="Privado", is_system=False)
    db_session.add_all([own, shared, private])
    db_session.commit()

    assert get_definition_for_user(db_session, own.id, alice.id).id == own.id
    assert get_definition_for_user(db_session, shared.id, alice.id).id == shared.id
    assert get_definition_for_user(db_session, system_definition.id, alice.id).id == system_definition.id

    with pytest.raises(ActionError) as exc:
        get_definition_for_user(db_session, private.id, alice.id)
    assert exc.value.code == "FORBIDDEN"

    with pytest.raises(ActionError) as exc:
        get_definition_for_user(db_session, "no-existe", alice.id)
    assert exc.value.code == "NOT_FOUND"


def test_get_owned_assignment_hides_other_users_rows(db_session, alice, bob, system_definition):
    assignment = DailyChallengeAssignment(user_id=bob.id, challenge_id=system_definition.id)
    db_session.add(assignment)
    db_session.commit()

    assert get_owned_assignment(db_session, assignment.id, bob.id).id == assignment.id
    with pytest.raises(ActionError) as exc:
        get_owned_assignment(db_session, assignment.id, alice.id)
    assert exc.value.code == "NOT_FOUND"
    assert exc.value.status_code == 404
