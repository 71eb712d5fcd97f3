"""
=============================================================================
ACTIONS.PY — Acciones de los Desafíos Diarios
=============================================================================
Las seis acciones que usa la web:

  DEFINICIONES  → create_definition, update_definition, list_definitions
  ASIGNACIONES  → create_assignment, update_assignment, list_assignments

Todas siguen el mismo patrón:
  1. require_user(context)  → UNAUTHORIZED si no hay sesión
  2. (opcional) cargar y autorizar la fila relacionada
  3. UNA lectura o escritura en la BD
  4. devolver {"success": True, "data": {...}}

Reglas de acceso a una definición:
  - user_id NULL        → global, la ven todos
  - user_id == usuario  → es suya
  - is_system True      → la ven todos aunque tenga dueño
  Modificarla: el dueño, o cualquiera si es global (user_id NULL).

Las asignaciones son siempre privadas: el filtro por usuario va dentro
de la propia consulta.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from auth import ActionContext, require_user
from errors import ActionError
from models import AssignmentStatus, ChallengeDefinition, DailyChallengeAssignment
from schemas import (
    AssignmentCreate, AssignmentListFilter, AssignmentUpdate,
    DefinitionCreate, DefinitionListFilter, DefinitionUpdate,
)

logger = logging.getLogger("dailychallenge.actions")


# =============================================================================
# ===================== REGLAS DE ACCESO ======================================
# =============================================================================

def can_read_definition(owner_id: Optional[str], caller_id: str, is_system: bool) -> bool:
    """¿Puede caller_id ver/usar una definición de owner_id?"""
    return owner_id is None or owner_id == caller_id or bool(is_system)


def can_edit_definition(owner_id: Optional[str], caller_id: str) -> bool:
    """Modifican el dueño o cualquiera si es global; las de otros usuarios no"""
    return owner_id is None or owner_id == caller_id


def get_definition_for_user(db: Session, definition_id: str, user_id: str) -> ChallengeDefinition:
    """Carga una definición comprobando que el usuario puede verla"""
    definition = db.query(ChallengeDefinition).filter(
        ChallengeDefinition.id == definition_id
    ).first()

    if definition is None:
        raise ActionError("NOT_FOUND", "Desafío no encontrado.")

    if not can_read_definition(definition.user_id, user_id, definition.is_system):
        logger.warning(f"Acceso denegado a la definición {definition_id} (user: {user_id})")
        raise ActionError("FORBIDDEN", "No tienes acceso a este desafío.")

    return definition


def get_owned_assignment(db: Session, assignment_id: str, user_id: str) -> DailyChallengeAssignment:
    """Carga una asignación del usuario. Si es de otro, es como si no existiera."""
    assignment = db.query(DailyChallengeAssignment).filter(
        DailyChallengeAssignment.id == assignment_id,
        DailyChallengeAssignment.user_id == user_id
    ).first()

    if assignment is None:
        raise ActionError("NOT_FOUND", "Asignación no encontrada.")

    return assignment


# =============================================================================
# ===================== DEFINICIONES ==========================================
# =============================================================================

def create_definition(data: DefinitionCreate, context: ActionContext) -> dict:
    """Crea un desafío propio del usuario (nunca de sistema)"""
    user = require_user(context)
    db = context.db
    now = datetime.utcnow()

    definition = ChallengeDefinition(
        user_id=user.id,
        title=data.title,
        description=data.description,
        category=data.category,
        difficulty=data.difficulty,
        suggested_frequency=data.suggested_frequency,
        estimated_minutes=data.estimated_minutes,
        is_system=False,
        is_active=data.is_active if data.is_active is not None else True,
        created_at=now,
        updated_at=now,
    )
    db.add(definition)
    db.commit()
    db.refresh(definition)

    logger.info(f"➕ Desafío creado: {definition.title} (user: {user.id})")
    return {"success": True, "data": {"definition": definition}}


def update_definition(data: DefinitionUpdate, context: ActionContext) -> dict:
    """Actualiza solo los campos enviados y refresca updated_at"""
    user = require_user(context)
    db = context.db
    definition = get_definition_for_user(db, data.id, user.id)

    if not can_edit_definition(definition.user_id, user.id):
        logger.warning(f"Edición denegada de la definición {definition.id} (user: {user.id})")
        raise ActionError("FORBIDDEN", "No puedes modificar este desafío.")

    for key, value in data.changes().items():
        setattr(definition, key, value)
    definition.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(definition)
    return {"success": True, "data": {"definition": definition}}


def list_definitions(data: DefinitionListFilter, context: ActionContext) -> dict:
    """Desafíos globales + los del usuario. Por defecto solo los activos."""
    user = require_user(context)

    query = context.db.query(ChallengeDefinition).filter(
        or_(
            ChallengeDefinition.user_id == user.id,
            ChallengeDefinition.user_id.is_(None),
        )
    )
    if not data.include_inactive:
        query = query.filter(ChallengeDefinition.is_active == True)

    definitions = query.order_by(ChallengeDefinition.created_at).all()
    return {"success": True, "data": {"items": definitions, "total": len(definitions)}}


# =============================================================================
# ===================== ASIGNACIONES ==========================================
# =============================================================================

def create_assignment(data: AssignmentCreate, context: ActionContext) -> dict:
    """Asigna un desafío visible al usuario (por defecto hoy y "pending")"""
    user = require_user(context)
    db = context.db
    get_definition_for_user(db, data.challenge_id, user.id)

    now = datetime.utcnow()
    assignment = DailyChallengeAssignment(
        user_id=user.id,
        challenge_id=data.challenge_id,
        assignment_date=data.assignment_date or now,
        status=data.status if data.status is not None else AssignmentStatus.pending.value,
        completed_at=data.completed_at,
        reflection=data.reflection,
        rating=data.rating,
        created_at=now,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)

    logger.info(f"📅 Desafío {data.challenge_id} asignado (user: {user.id})")
    return {"success": True, "data": {"assignment": assignment}}


def update_assignment(data: AssignmentUpdate, context: ActionContext) -> dict:
    """Actualiza estado, completed_at, reflexión o rating de una asignación propia"""
    user = require_user(context)
    db = context.db
    assignment = get_owned_assignment(db, data.id, user.id)

    # Sin updated_at: las asignaciones no guardan fecha de modificación
    for key, value in data.changes().items():
        setattr(assignment, key, value)

    db.commit()
    db.refresh(assignment)
    return {"success": True, "data": {"assignment": assignment}}


def list_assignments(data: Optional[AssignmentListFilter], context: ActionContext) -> dict:
    """Asignaciones del usuario, opcionalmente de un solo desafío"""
    user = require_user(context)
    db = context.db

    query = db.query(DailyChallengeAssignment).filter(
        DailyChallengeAssignment.user_id == user.id
    )
    if data is not None and data.challenge_id:
        get_definition_for_user(db, data.challenge_id, user.id)
        query = query.filter(DailyChallengeAssignment.challenge_id == data.challenge_id)

    assignments = query.order_by(
        DailyChallengeAssignment.assignment_date.desc(),
        DailyChallengeAssignment.created_at.desc()
    ).all()
    return {"success": True, "data": {"items": assignments, "total": len(assignments)}}
