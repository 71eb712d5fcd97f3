"""
=============================================================================
MAIN.PY — La API de Desafíos Diarios
=============================================================================
Organización por secciones:
  1. AUTH         → Registro, login, perfil
  2. DEFINICIONES → createDefinition, updateDefinition, listDefinitions
  3. ASIGNACIONES → createAssignment, updateAssignment, listAssignments

Las acciones se llaman con POST /actions/<nombre> y un JSON en el body.
Respuestas:
  OK    → {"success": true, "data": {...}}
  Error → {"success": false, "error": {"code": "NOT_FOUND", "message": "..."}}
"""

import os
import logging
import traceback
from datetime import datetime
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

import actions
from auth import (
    ActionContext, create_access_token, get_action_context, hash_password,
    require_user, verify_password,
)
from database import SessionLocal, get_db, init_db
from errors import ActionError
from models import User
from schemas import (
    AssignmentCreate, AssignmentEnvelope, AssignmentListEnvelope,
    AssignmentListFilter, AssignmentUpdate,
    DefinitionCreate, DefinitionEnvelope, DefinitionListEnvelope,
    DefinitionListFilter, DefinitionUpdate,
    TokenResponse, UserLogin, UserRegister, UserResponse,
)
from seeds import seed_system_challenges

APP_NAME = "Daily Challenge"
APP_VERSION = "1.0.0"

# ─────────────────────────────────────────────────────────────────────────────
# LOGGING
# ─────────────────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s"
)
logger = logging.getLogger("dailychallenge.api")

# ─────────────────────────────────────────────────────────────────────────────
# CONFIGURACIÓN
# ─────────────────────────────────────────────────────────────────────────────

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
SEED_SYSTEM_CHALLENGES = os.getenv("SEED_SYSTEM_CHALLENGES", "true").lower() in ("1", "true", "yes")


# ─────────────────────────────────────────────────────────────────────────────
# LIFESPAN (Arranque y apagado)
# ─────────────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Arranque:
      1. Crear tablas si no existen
      2. Insertar los desafíos del sistema
    """
    logger.info(f"🚀 Arrancando {APP_NAME}...")

    init_db()
    logger.info("✅ Base de datos inicializada")

    if SEED_SYSTEM_CHALLENGES:
        db = SessionLocal()
        try:
            seed_system_challenges(db)
        finally:
            db.close()

    yield

    logger.info(f"👋 {APP_NAME} apagado")


# ─────────────────────────────────────────────────────────────────────────────
# APLICACIÓN FASTAPI
# ─────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=f"{APP_NAME} API",
    description="Desafíos diarios: definiciones y asignaciones por usuario",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─────────────────────────────────────────────────────────────────────────────
# ERROR HANDLERS
# ─────────────────────────────────────────────────────────────────────────────

@app.exception_handler(ActionError)
async def action_error_handler(request: Request, exc: ActionError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Input inválido → BAD_REQUEST, con la lista de errores de Pydantic"""
    issues = jsonable_encoder(exc.errors())
    message = "; ".join(e.get("msg", "") for e in issues) or "Datos de entrada inválidos."
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": {"code": "BAD_REQUEST", "message": message, "issues": issues},
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Captura errores no manejados y los registra con su traza"""
    logger.error(f"❌ Error no manejado en {request.url}: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {"code": "INTERNAL_SERVER_ERROR", "message": str(exc)},
        },
    )


# =============================================================================
# ===================== HEALTH CHECK ==========================================
# =============================================================================

@app.get("/", tags=["Health"])
def health_check():
    """Verifica que la API está viva"""
    return {
        "status": "ok",
        "app": APP_NAME,
        "version": APP_VERSION,
        "timestamp": datetime.utcnow().isoformat()
    }


# =============================================================================
# ===================== SECCIÓN 1: AUTH =======================================
# =============================================================================

@app.post("/auth/register", response_model=TokenResponse, tags=["Auth"])
def register(data: UserRegister, db: Session = Depends(get_db)):
    """Registra un usuario nuevo y devuelve su token"""
    existing = db.query(User).filter(User.email == data.email).first()
    if existing:
        raise ActionError("CONFLICT", "Ya existe una cuenta con este email.")

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        name=data.name
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"👤 Nuevo usuario registrado: {user.name} ({user.email})")

    return TokenResponse(
        access_token=create_access_token(user.id, user.email),
        user_id=user.id,
        name=user.name
    )


@app.post("/auth/login", response_model=TokenResponse, tags=["Auth"])
def login(data: UserLogin, db: Session = Depends(get_db)):
    """Inicia sesión con email y contraseña"""
    user = db.query(User).filter(User.email == data.email).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise ActionError("UNAUTHORIZED", "Email o contraseña incorrectos.")

    return TokenResponse(
        access_token=create_access_token(user.id, user.email),
        user_id=user.id,
        name=user.name
    )


@app.get("/auth/me", response_model=UserResponse, tags=["Auth"])
def get_me(context: ActionContext = Depends(get_action_context)):
    """Devuelve los datos del usuario autenticado"""
    return require_user(context)


# =============================================================================
# ===================== SECCIÓN 2: DEFINICIONES ===============================
# =============================================================================

@app.post("/actions/createDefinition", response_model=DefinitionEnvelope, tags=["Definitions"])
def create_definition(data: DefinitionCreate, context: ActionContext = Depends(get_action_context)):
    return actions.create_definition(data, context)


@app.post("/actions/updateDefinition", response_model=DefinitionEnvelope, tags=["Definitions"])
def update_definition(data: DefinitionUpdate, context: ActionContext = Depends(get_action_context)):
    return actions.update_definition(data, context)


@app.post("/actions/listDefinitions", response_model=DefinitionListEnvelope, tags=["Definitions"])
def list_definitions(
    data: Optional[DefinitionListFilter] = None,
    context: ActionContext = Depends(get_action_context)
):
    """Sin body equivale a {"includeInactive": false}"""
    return actions.list_definitions(data or DefinitionListFilter(), context)


# =============================================================================
# ===================== SECCIÓN 3: ASIGNACIONES ===============================
# =============================================================================

@app.post("/actions/createAssignment", response_model=AssignmentEnvelope, tags=["Assignments"])
def create_assignment(data: AssignmentCreate, context: ActionContext = Depends(get_action_context)):
    return actions.create_assignment(data, context)


@app.post("/actions/updateAssignment", response_model=AssignmentEnvelope, tags=["Assignments"])
def update_assignment(data: AssignmentUpdate, context: ActionContext = Depends(get_action_context)):
    return actions.update_assignment(data, context)


@app.post("/actions/listAssignments", response_model=AssignmentListEnvelope, tags=["Assignments"])
def list_assignments(
    data: Optional[AssignmentListFilter] = None,
    context: ActionContext = Depends(get_action_context)
):
    return actions.list_assignments(data, context)
