"""
Schémas Pydantic pour les projets et leurs tâches.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

VALID_PROJECT_STATUSES = {"active", "completed", "archived"}
VALID_TASK_STATUSES = {"todo", "in-progress", "completed"}
VALID_ASSIGNEE_TYPES = {"teacher", "student"}


def _title_not_empty(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("Le titre ne peut pas être vide.")
    return v.strip() if v else v


# --- Projets ---

class ProjectCreate(BaseModel):
    title: str
    group_id: uuid.UUID
    description: Optional[str] = None
    status: str = "active"

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return _title_not_empty(v)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v not in VALID_PROJECT_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(VALID_PROJECT_STATUSES)}")
        return v


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: Optional[str]) -> Optional[str]:
        return _title_not_empty(v)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_PROJECT_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(VALID_PROJECT_STATUSES)}")
        return v


class ProjectResponse(BaseModel):
    id: uuid.UUID
    group_id: uuid.UUID
    title: str
    description: Optional[str]
    status: str
    created_by: Optional[uuid.UUID]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


# --- Tâches ---

class _TaskAssigneeFields(BaseModel):
    """
    Champs d'assignation communs à la création et à la modification.
    assignee_id désigne un enseignant, student_assignee_id un élève.
    """
    assignee_type: Optional[str] = None
    assignee_id: Optional[uuid.UUID] = None
    student_assignee_id: Optional[uuid.UUID] = None

    @field_validator("assignee_type")
    @classmethod
    def valid_assignee_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_ASSIGNEE_TYPES:
            raise ValueError(f"Type d'assignation invalide. Valeurs acceptées : {sorted(VALID_ASSIGNEE_TYPES)}")
        return v

    @model_validator(mode="after")
    def single_assignee(self):
        if self.assignee_id is not None and self.student_assignee_id is not None:
            raise ValueError("Une tâche ne peut être assignée qu'à un enseignant ou à un élève, pas aux deux.")
        if self.assignee_type == "teacher" and self.student_assignee_id is not None:
            raise ValueError("assignee_type 'teacher' incompatible avec student_assignee_id.")
        if self.assignee_type == "student" and self.assignee_id is not None:
            raise ValueError("assignee_type 'student' incompatible avec assignee_id.")
        return self

    @property
    def touches_assignee(self) -> bool:
        return bool({"assignee_type", "assignee_id", "student_assignee_id"} & self.model_fields_set)


class TaskCreate(_TaskAssigneeFields):
    title: str
    description: Optional[str] = None
    status: str = "todo"

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return _title_not_empty(v)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v not in VALID_TASK_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(VALID_TASK_STATUSES)}")
        return v


class TaskUpdate(_TaskAssigneeFields):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: Optional[str]) -> Optional[str]:
        return _title_not_empty(v)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_TASK_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(VALID_TASK_STATUSES)}")
        return v

    @model_validator(mode="after")
    def not_empty(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("Aucune modification fournie.")
        return self


class TaskAssignee(BaseModel):
    """Résumé de la personne assignée à une tâche."""
    id: uuid.UUID
    role: str
    first_name: str = "Inconnu"
    last_name: str = ""
    last_initial: str = ""


class TaskResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    description: Optional[str]
    status: str
    assignee_type: Optional[str]
    assignee_id: Optional[uuid.UUID]
    student_assignee_id: Optional[uuid.UUID]
    assignee: Optional[TaskAssignee] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
