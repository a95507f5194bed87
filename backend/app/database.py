"""
Configuration de la connexion à la base de données PostgreSQL.
Utilise SQLAlchemy avec un moteur synchrone.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from app.config import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI: fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Crée les tables manquantes (développement uniquement).
    En production le schéma est géré par les scripts SQL de déploiement.
    """
    import app.models  # noqa: F401 (enregistre les tables dans Base.metadata)

    Base.metadata.create_all(bind=engine)
