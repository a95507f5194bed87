"""
Schémas Pydantic pour les groupes et leurs membres.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

VALID_MEMBER_ROLES = {"teacher", "student"}


class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du groupe est obligatoire.")
        return v.strip()

    @field_validator("description")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v is not None else v


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom du groupe est obligatoire.")
        return v.strip() if v else v

    @field_validator("description")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v is not None else v


class GroupResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str]
    created_by: Optional[uuid.UUID]
    nb_teachers: int
    nb_students: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class GroupMemberCreate(BaseModel):
    """
    Corps de requête pour ajouter un membre.
    Un enseignant est désigné par user_id, un élève par student_id.
    """
    role: str
    user_id: Optional[uuid.UUID] = None
    student_id: Optional[uuid.UUID] = None

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in VALID_MEMBER_ROLES:
            raise ValueError(f"Rôle invalide. Valeurs acceptées : {sorted(VALID_MEMBER_ROLES)}")
        return v

    @model_validator(mode="after")
    def target_matches_role(self) -> "GroupMemberCreate":
        if self.user_id is not None and self.student_id is not None:
            raise ValueError("Un membre est soit un enseignant (user_id), soit un élève (student_id).")
        if self.role == "teacher" and self.user_id is None:
            raise ValueError("user_id est obligatoire pour un membre enseignant.")
        if self.role == "student" and self.student_id is None:
            raise ValueError("student_id est obligatoire pour un membre élève.")
        return self


class GroupMemberResponse(BaseModel):
    """Membre d'un groupe avec son nom d'affichage."""
    id: uuid.UUID
    group_id: uuid.UUID
    role: str
    user_id: Optional[uuid.UUID]
    student_id: Optional[uuid.UUID]
    first_name: str = "Inconnu"
    last_name: str = ""
    last_initial: str = ""
    created_at: Optional[datetime]
