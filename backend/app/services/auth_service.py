"""
Service métier pour les comptes enseignants : inscription, connexion, annuaire.
"""

import logging
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import hash_password, verify_password
from app.exceptions import ConflictError
from app.models.user import User
from app.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def register_user(db: Session, data: RegisterRequest) -> User:
    """
    Crée un compte enseignant avec un mot de passe haché.
    Lève une ConflictError si l'email est déjà utilisé.
    """
    email = data.email.lower()
    existing = db.execute(select(User.id).where(func.lower(User.email) == email)).scalar()
    if existing is not None:
        raise ConflictError("Un compte existe déjà avec cet email.")

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        is_admin=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Un compte existe déjà avec cet email.")
    db.refresh(user)
    logger.info("Compte enseignant créé : %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Retourne l'utilisateur si les identifiants sont valides, sinon None."""
    user = db.execute(
        select(User).where(func.lower(User.email) == email.lower())
    ).scalar()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def list_teachers(db: Session, search: Optional[str] = None) -> list[User]:
    """Annuaire des enseignants, trié par prénom, filtrable par nom ou email."""
    query = select(User).order_by(User.first_name, User.last_name)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern),
        ))
    return list(db.execute(query).scalars().all())
