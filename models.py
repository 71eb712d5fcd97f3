"""
=============================================================================
MODELS.PY — Modelos (Tablas) de la Base de Datos
=============================================================================
Cada clase = una tabla. Cada atributo = una columna.

RELACIONES:
  USER
  ├── challenge_definitions[] (los desafíos que ha creado)
  └── assignments[] ──→ definition

  Las definiciones con user_id NULL son del sistema (globales).
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import (
    Column, Float, String, Boolean, Text, DateTime, ForeignKey
)
from sqlalchemy.orm import relationship
from database import Base


def generate_id() -> str:
    """IDs de texto (UUID4), generados al insertar"""
    return str(uuid.uuid4())


# =============================================================================
# ===================== ENUMS (Valores habituales) ============================
# =============================================================================
# Las columnas son texto libre; estos enums solo documentan los valores
# que usa la web y sirven de valor por defecto.

class AssignmentStatus(str, enum.Enum):
    """Estado de un desafío asignado a un día"""
    pending = "pending"
    completed = "completed"
    skipped = "skipped"

class ChallengeDifficulty(str, enum.Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"

class ChallengeFrequency(str, enum.Enum):
    """Con qué frecuencia se sugiere hacer el desafío"""
    daily = "daily"
    weekdays = "weekdays"
    weekends = "weekends"


# =============================================================================
# ===================== TABLA 1: USERS ========================================
# =============================================================================

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)

    # ── Timestamps ──
    created_at = Column(DateTime, default=datetime.utcnow)
    last_active = Column(DateTime, default=datetime.utcnow)

    # ── Relaciones ──
    challenge_definitions = relationship("ChallengeDefinition", back_populates="user")
    assignments = relationship("DailyChallengeAssignment", back_populates="user")


# =============================================================================
# ===================== TABLA 2: CHALLENGE_DEFINITIONS ========================
# =============================================================================
# Plantillas de desafío: "Leer 10 páginas", "Caminar 5.000 pasos"...
# user_id NULL → desafío global del sistema, visible para todos.

class ChallengeDefinition(Base):
    __tablename__ = "challenge_definitions"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    # category → "learning", "fitness", "mindfulness"...
    difficulty = Column(String(20), nullable=True)

    suggested_frequency = Column(String(20), nullable=True)
    estimated_minutes = Column(Float, nullable=True)

    # ── Estado ──
    is_system = Column(Boolean, default=False, nullable=False)
    # is_system → visible para todos aunque tenga dueño
    is_active = Column(Boolean, default=True, nullable=False)

    # ── Timestamps ──
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="challenge_definitions")
    assignments = relationship("DailyChallengeAssignment", back_populates="definition")


# =============================================================================
# ===================== TABLA 3: DAILY_CHALLENGE_ASSIGNMENTS ==================
# =============================================================================
# Un desafío concreto asignado a un usuario para un día.

class DailyChallengeAssignment(Base):
    __tablename__ = "daily_challenge_assignments"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    challenge_id = Column(String(36), ForeignKey("challenge_definitions.id"), nullable=False)

    assignment_date = Column(DateTime, default=datetime.utcnow)
    status = Column(String(20), nullable=True, default=AssignmentStatus.pending.value)
    completed_at = Column(DateTime, nullable=True)

    reflection = Column(Text, nullable=True)
    # reflection → nota corta opcional
    rating = Column(Float, nullable=True)
    # rating → 1-5, cómo se sintió el usuario

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="assignments")
    definition = relationship("ChallengeDefinition", back_populates="assignments")
