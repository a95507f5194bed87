"""
Router pour l'authentification des enseignants (session par cookie).
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.auth import clear_session_cookie, create_access_token, get_current_user, set_session_cookie
from app.database import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from app.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/register", response_model=UserResponse, status_code=201, summary="Créer un compte enseignant")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Crée un compte enseignant. L'email doit être unique."""
    return auth_service.register_user(db, data)


@router.post("/login", response_model=LoginResponse, summary="Se connecter")
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """
    Vérifie les identifiants et ouvre une session.
    Le jeton est posé dans un cookie HttpOnly et renvoyé dans le corps.
    """
    user = auth_service.authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Email ou mot de passe incorrect.")

    token = create_access_token(user.id)
    set_session_cookie(response, token)
    return LoginResponse(user=UserResponse.model_validate(user), access_token=token)


@router.post("/logout", summary="Se déconnecter")
def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}


@router.get("/me", response_model=UserResponse, summary="Utilisateur connecté")
def me(current_user: User = Depends(get_current_user)):
    return current_user
