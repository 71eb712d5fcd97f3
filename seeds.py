"""
=============================================================================
SEEDS.PY — Desafíos del Sistema
=============================================================================
Catálogo de desafíos globales (user_id NULL, is_system True) que ve
cualquier usuario desde el primer día. Se insertan al arrancar la
aplicación si todavía no existen; ejecutarlo varias veces no duplica nada.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from models import ChallengeDefinition, ChallengeDifficulty, ChallengeFrequency

logger = logging.getLogger("dailychallenge.seeds")

D = ChallengeDifficulty
F = ChallengeFrequency

SYSTEM_CHALLENGES = [
    # ── Aprendizaje ──
    {"title": "Leer 10 páginas", "description": "Lee 10 páginas de cualquier libro", "category": "learning", "difficulty": D.easy, "frequency": F.daily, "minutes": 15},
    {"title": "Aprender 5 palabras nuevas", "description": "En el idioma que estés estudiando", "category": "learning", "difficulty": D.easy, "frequency": F.weekdays, "minutes": 10},

    # ── Forma física ──
    {"title": "Caminar 5.000 pasos", "description": "Sal a caminar, aunque sea en dos tandas", "category": "fitness", "difficulty": D.easy, "frequency": F.daily, "minutes": 45},
    {"title": "20 flexiones", "description": "Pueden ser en series", "category": "fitness", "difficulty": D.medium, "frequency": F.daily, "minutes": 5},
    {"title": "Salir a correr 30 minutos", "description": None, "category": "fitness", "difficulty": D.hard, "frequency": F.weekends, "minutes": 30},

    # ── Mente ──
    {"title": "Meditar 10 minutos", "description": "Siéntate, respira y observa", "category": "mindfulness", "difficulty": D.easy, "frequency": F.daily, "minutes": 10},
    {"title": "Escribir 3 cosas por las que estás agradecido", "description": None, "category": "mindfulness", "difficulty": D.easy, "frequency": F.daily, "minutes": 5},
    {"title": "Un día sin redes sociales", "description": "Ni una sola vez", "category": "mindfulness", "difficulty": D.hard, "frequency": F.weekends, "minutes": None},
]


def seed_system_challenges(db: Session) -> int:
    """
    Inserta los desafíos del sistema que falten.
    Un desafío se considera existente si hay uno global con el mismo título.
    Devuelve cuántos se han insertado.
    """
    inserted = 0
    now = datetime.utcnow()
    for ch in SYSTEM_CHALLENGES:
        existing = db.query(ChallengeDefinition).filter(
            ChallengeDefinition.user_id.is_(None),
            ChallengeDefinition.title == ch["title"]
        ).first()
        if existing:
            continue
        db.add(ChallengeDefinition(
            user_id=None,
            title=ch["title"],
            description=ch["description"],
            category=ch["category"],
            difficulty=ch["difficulty"].value,
            suggested_frequency=ch["frequency"].value,
            estimated_minutes=ch["minutes"],
            is_system=True,
            is_active=True,
            created_at=now,
            updated_at=now,
        ))
        inserted += 1
    db.commit()
    logger.info(f"✅ {len(SYSTEM_CHALLENGES)} desafíos del sistema verificados ({inserted} nuevos)")
    return inserted
