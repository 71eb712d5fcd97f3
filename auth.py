"""
=============================================================================
AUTH.PY — Sistema de Autenticación
=============================================================================
Gestiona:
  - Hashing de contraseñas (bcrypt)
  - Creación y verificación de tokens JWT
  - El contexto de cada petición: sesión de BD + usuario autenticado

Flujo:
  1. El usuario hace login y recibe un JWT
  2. Envía "Authorization: Bearer <token>" en cada acción
  3. get_action_context() decodifica el token y carga el usuario
  4. Cada acción llama a require_user() antes de hacer nada
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from database import get_db
from errors import ActionError
from models import User

logger = logging.getLogger("dailychallenge.auth")

# ─────────────────────────────────────────────────────────────────────────────
# CONFIGURACIÓN
# ─────────────────────────────────────────────────────────────────────────────

SECRET_KEY = os.getenv("SECRET_KEY", "dailychallenge-dev-secret-key-cambiar-en-produccion")
# SECRET_KEY → firma de los JWT. En producción, una larga y aleatoria.

ALGORITHM = "HS256"

ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "30"))


# ─────────────────────────────────────────────────────────────────────────────
# HASHING DE CONTRASEÑAS
# ─────────────────────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    """Convierte una contraseña en texto plano a un hash seguro"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compara una contraseña en texto plano con un hash almacenado"""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


# ─────────────────────────────────────────────────────────────────────────────
# TOKENS JWT
# ─────────────────────────────────────────────────────────────────────────────

def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Crea un JWT con:
      - sub: el ID del usuario
      - email: para referencia
      - exp: cuándo caduca
    """
    if expires_delta is None:
        expires_delta = timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Devuelve el payload, o None si el token es inválido o ha caducado"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# CONTEXTO DE LA PETICIÓN
# ─────────────────────────────────────────────────────────────────────────────
# auto_error=False → sin cabecera no falla aquí; es require_user() quien
# decide, para que todas las acciones respondan igual (UNAUTHORIZED).

security = HTTPBearer(auto_error=False)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Usuario del token, o None si no hay token, es inválido, ha caducado
    o el usuario ya no existe.
    """
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if payload is None:
        logger.warning("Token inválido o expirado")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    user = db.query(User).filter(User.id == str(user_id)).first()
    if user is None:
        return None

    user.last_active = datetime.utcnow()
    db.commit()
    return user


@dataclass
class ActionContext:
    """Lo que recibe cada acción además de su input"""
    db: Session
    user: Optional[User] = None


def get_action_context(
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
) -> ActionContext:
    return ActionContext(db=db, user=user)


def require_user(context: ActionContext) -> User:
    """Primer paso de toda acción: sin usuario → UNAUTHORIZED"""
    if context.user is None:
        raise ActionError("UNAUTHORIZED", "Debes iniciar sesión para realizar esta acción.")
    return context.user
