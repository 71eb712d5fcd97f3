"""
=============================================================================
DATABASE.PY — Configuración de la Base de Datos
=============================================================================
Conexión a la base de datos de los desafíos diarios.

En DESARROLLO: SQLite (un archivo daily_challenges.db)
En PRODUCCIÓN: PostgreSQL (driver psycopg v3)

La URL sale de la variable de entorno DATABASE_URL.
Si no existe, se usa SQLite local.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

# ─────────────────────────────────────────────────────────────────────────────
# CONEXIÓN
# ─────────────────────────────────────────────────────────────────────────────

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./daily_challenges.db")


def normalize_database_url(url: str) -> str:
    """
    Los proveedores suelen dar la URL como "postgres://..." pero SQLAlchemy
    necesita "postgresql+psycopg://" para usar psycopg v3.
    """
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


DATABASE_URL = normalize_database_url(DATABASE_URL)

# ─────────────────────────────────────────────────────────────────────────────
# ENGINE
# ─────────────────────────────────────────────────────────────────────────────
# check_same_thread=False → solo para SQLite, que por defecto no deja usar
# una conexión desde varios hilos (FastAPI atiende peticiones en un pool).

engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, echo=False, **engine_args)

# ─────────────────────────────────────────────────────────────────────────────
# SESSION + BASE
# ─────────────────────────────────────────────────────────────────────────────

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Una sesión por petición. Se usa como dependencia de FastAPI:
      def endpoint(db: Session = Depends(get_db)): ...
    La sesión se cierra siempre al terminar la petición.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Crea las tablas que falten. Se llama una vez al arrancar."""
    Base.metadata.create_all(bind=engine)
