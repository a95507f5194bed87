"""
Authentification par session : hachage des mots de passe, jetons JWT
et dépendances FastAPI `get_current_user` / `require_admin`.

Le jeton est lu dans le cookie de session ; à défaut, dans l'en-tête
`Authorization: Bearer` (clients API sans cookies).
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User

logger = logging.getLogger(__name__)

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return PWD_CTX.verify(password, password_hash)


def create_access_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Signe un jeton de session dont le sujet est l'ID de l'enseignant."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Vérifie la signature et l'expiration du jeton et retourne l'ID utilisateur.
    Lève une HTTPException 401 en cas d'échec.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session expirée.")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Jeton de session invalide.")

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Jeton de session invalide.")


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Dépendance FastAPI: retourne l'enseignant connecté ou lève une 401."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise HTTPException(status_code=401, detail="Authentification requise.")

    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Utilisateur introuvable.")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dépendance FastAPI: réservée aux comptes administrateurs."""
    if not user.is_admin:
        logger.warning("Accès administrateur refusé pour %s", user.id)
        raise HTTPException(status_code=403, detail="Accès réservé aux administrateurs.")
    return user
