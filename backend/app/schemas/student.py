"""
Schémas Pydantic pour les élèves.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator

VALID_STUDENT_STATUSES = {"present", "absent"}


def normalize_last_initial(v: Optional[str]) -> Optional[str]:
    """Ne conserve que la première lettre du nom, en majuscule."""
    if v is None:
        return None
    v = v.strip()
    return v[0].upper() if v else None


class StudentCreate(BaseModel):
    """Schéma de création d'un élève (POST /students)."""
    first_name: str
    last_initial: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le prénom ne peut pas être vide.")
        return v.strip()

    @field_validator("last_initial")
    @classmethod
    def initial(cls, v: Optional[str]) -> Optional[str]:
        return normalize_last_initial(v)


class StudentReplace(BaseModel):
    """Schéma de remplacement complet (PUT /students/{id}) : les deux champs sont requis."""
    first_name: str
    last_initial: str

    @field_validator("first_name", "last_initial")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("last_initial")
    @classmethod
    def initial(cls, v: str) -> str:
        return normalize_last_initial(v)


class StudentPatch(BaseModel):
    """
    Schéma de mise à jour partielle (PATCH /students/{id}).
    last_initial peut être remis à null ; first_name et status non.
    """
    first_name: Optional[str] = None
    last_initial: Optional[str] = None
    status: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def first_name_not_empty(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("Le prénom ne peut pas être vide.")
        return v.strip()

    @field_validator("last_initial")
    @classmethod
    def initial(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return normalize_last_initial(v)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> str:
        if v not in VALID_STUDENT_STATUSES:
            raise ValueError('Le statut doit être "present" ou "absent".')
        return v

    @model_validator(mode="after")
    def at_least_one_field(self) -> "StudentPatch":
        if not self.model_fields_set:
            raise ValueError("Aucune modification fournie.")
        return self


class StudentResponse(BaseModel):
    """Schéma de réponse pour un élève."""
    id: uuid.UUID
    teacher_id: uuid.UUID
    first_name: str
    last_initial: Optional[str]
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# --- Fiche élève ---

class StudentGroupSummary(BaseModel):
    membership_id: uuid.UUID
    group_id: uuid.UUID
    name: str
    description: Optional[str]
    joined_at: Optional[datetime]


class StudentProjectSummary(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str]
    status: str
    group_id: uuid.UUID
    group_name: str
    created_at: Optional[datetime]


class StudentTaskSummary(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str]
    status: str
    project_id: uuid.UUID
    project_title: str
    group_id: uuid.UUID
    group_name: str
    updated_at: Optional[datetime]


class StudentStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    todo_tasks: int
    completion_rate: int  # pourcentage arrondi


class StudentProfile(BaseModel):
    """Fiche complète d'un élève (GET /students/{id}/profile)."""
    student: StudentResponse
    groups: List[StudentGroupSummary]
    projects: List[StudentProjectSummary]
    tasks: List[StudentTaskSummary]
    stats: StudentStats
