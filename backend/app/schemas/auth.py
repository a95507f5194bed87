"""
Schémas Pydantic pour l'authentification et les profils enseignants.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

MIN_PASSWORD_LENGTH = 8


class RegisterRequest(BaseModel):
    """Création d'un compte enseignant (POST /auth/register)."""
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Le mot de passe doit contenir au moins {MIN_PASSWORD_LENGTH} caractères."
            )
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v is not None else v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Profil public d'un enseignant."""
    id: uuid.UUID
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    is_admin: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """
    Réponse de connexion. Le jeton est aussi posé dans le cookie de session ;
    il est renvoyé dans le corps pour les clients qui n'utilisent pas les cookies.
    """
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class TeacherSummary(BaseModel):
    """Ligne de l'annuaire des enseignants (GET /teachers)."""
    id: uuid.UUID
    first_name: Optional[str]
    last_name: Optional[str]
    email: str

    model_config = {"from_attributes": True}
