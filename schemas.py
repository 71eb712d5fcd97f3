"""
=============================================================================
SCHEMAS.PY — Esquemas de Validación (Pydantic)
=============================================================================
  - Models (SQLAlchemy) → definen las TABLAS de la BD
  - Schemas (Pydantic) → definen qué DATOS acepta/devuelve la API

La web habla en camelCase ("challengeId", "isActive"...), así que todos los
esquemas usan alias camelCase. En Python seguimos con snake_case, y en la
entrada también se acepta snake_case.

Convención de nombres:
  XxxCreate → crear (acción create*)
  XxxUpdate → actualizar parcialmente (acción update*)
  XxxListFilter → filtros de las acciones list*
  XxxResponse → lo que devuelve la API
  XxxEnvelope → respuesta completa {"success": true, "data": {...}}
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base común: alias camelCase + lectura desde objetos ORM"""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class PatchModel(ApiModel):
    """
    Actualización parcial identificada por `id`.

    Exige que llegue al menos un campo además del id. Los campos son
    opcionales pero no anulables: un null explícito es un error.
    La validación ocurre antes de tocar la BD.
    """
    id: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_at_least_one_field(self):
        nulls = sorted(k for k in self.model_fields_set if getattr(self, k) is None)
        if nulls:
            raise ValueError(f"Campos sin valor (null): {', '.join(nulls)}")
        if not self.changes():
            raise ValueError("Debes indicar al menos un campo para actualizar.")
        return self

    def changes(self) -> dict:
        """Campos a aplicar, con sus nombres de columna"""
        return self.model_dump(exclude={"id"}, exclude_unset=True)


# =============================================================================
# ===================== AUTH ==================================================
# =============================================================================

class UserRegister(ApiModel):
    """Datos para registrar un usuario nuevo"""
    email: EmailStr
    password: str = Field(min_length=6, description="Mínimo 6 caracteres")
    name: str = Field(min_length=1, max_length=100)

class UserLogin(ApiModel):
    email: EmailStr
    password: str

class TokenResponse(ApiModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    name: str

class UserResponse(ApiModel):
    id: str
    email: str
    name: str
    created_at: datetime
    last_active: datetime


# =============================================================================
# ===================== CHALLENGE DEFINITIONS =================================
# =============================================================================

class DefinitionCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    suggested_frequency: Optional[str] = None
    estimated_minutes: Optional[float] = None
    is_active: Optional[bool] = None

class DefinitionUpdate(PatchModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    suggested_frequency: Optional[str] = None
    estimated_minutes: Optional[float] = None
    is_active: Optional[bool] = None

class DefinitionListFilter(ApiModel):
    include_inactive: bool = False

class DefinitionResponse(ApiModel):
    id: str
    user_id: Optional[str]
    title: str
    description: Optional[str]
    category: Optional[str]
    difficulty: Optional[str]
    suggested_frequency: Optional[str]
    estimated_minutes: Optional[float]
    is_system: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

class DefinitionData(ApiModel):
    definition: DefinitionResponse

class DefinitionEnvelope(ApiModel):
    success: bool = True
    data: DefinitionData

class DefinitionListData(ApiModel):
    items: list[DefinitionResponse]
    total: int

class DefinitionListEnvelope(ApiModel):
    success: bool = True
    data: DefinitionListData


# =============================================================================
# ===================== DAILY ASSIGNMENTS =====================================
# =============================================================================

class AssignmentCreate(ApiModel):
    challenge_id: str = Field(min_length=1)
    assignment_date: Optional[datetime] = None
    status: Optional[str] = None
    completed_at: Optional[datetime] = None
    reflection: Optional[str] = None
    rating: Optional[float] = None

class AssignmentUpdate(PatchModel):
    status: Optional[str] = None
    completed_at: Optional[datetime] = None
    reflection: Optional[str] = None
    rating: Optional[float] = None

class AssignmentListFilter(ApiModel):
    challenge_id: Optional[str] = None

class AssignmentResponse(ApiModel):
    id: str
    user_id: str
    challenge_id: str
    assignment_date: datetime
    status: Optional[str]
    completed_at: Optional[datetime]
    reflection: Optional[str]
    rating: Optional[float]
    created_at: datetime

class AssignmentData(ApiModel):
    assignment: AssignmentResponse

class AssignmentEnvelope(ApiModel):
    success: bool = True
    data: AssignmentData

class AssignmentListData(ApiModel):
    items: list[AssignmentResponse]
    total: int

class AssignmentListEnvelope(ApiModel):
    success: bool = True
    data: AssignmentListData
