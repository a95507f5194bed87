"""
Schémas Pydantic pour les ressources et leur liaison aux projets.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, HttpUrl, TypeAdapter, ValidationError, field_validator, model_validator

VALID_RESOURCE_TYPES = {"link", "image"}

_http_url = TypeAdapter(HttpUrl)


def is_valid_link_url(url: str) -> bool:
    """Vrai si l'URL est absolue en http(s)."""
    try:
        _http_url.validate_python(url)
    except ValidationError:
        return False
    return True


def _normalize_type(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().lower()
    if v not in VALID_RESOURCE_TYPES:
        raise ValueError(f"Type invalide. Valeurs acceptées : {sorted(VALID_RESOURCE_TYPES)}")
    return v


def _not_empty(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("Le champ ne peut pas être vide.")
    return v.strip() if v else v


class ResourceCreate(BaseModel):
    type: str
    title: str
    url: str
    description: Optional[str] = None
    group_id: Optional[uuid.UUID] = None
    student_id: Optional[uuid.UUID] = None

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        return _normalize_type(v)

    @field_validator("title", "url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _not_empty(v)

    @model_validator(mode="after")
    def link_url_format(self) -> "ResourceCreate":
        if self.type == "link" and not is_valid_link_url(self.url):
            raise ValueError("Format d'URL invalide.")
        return self


class ResourceUpdate(BaseModel):
    """
    Mise à jour partielle. Le format de l'URL est vérifié par le service,
    car il dépend du type déjà enregistré.
    """
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    group_id: Optional[uuid.UUID] = None

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_type(v)

    @field_validator("title", "url")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        return _not_empty(v)

    @model_validator(mode="after")
    def at_least_one_field(self) -> "ResourceUpdate":
        if not self.model_fields_set:
            raise ValueError("Aucune modification fournie.")
        return self


class CreatorSummary(BaseModel):
    id: uuid.UUID
    first_name: str = "Inconnu"
    last_name: str = ""
    email: Optional[str] = None


class ResourceResponse(BaseModel):
    id: uuid.UUID
    type: str
    title: str
    description: Optional[str]
    url: str
    group_id: Optional[uuid.UUID]
    student_id: Optional[uuid.UUID]
    created_by: Optional[uuid.UUID]
    creator: Optional[CreatorSummary] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ProjectResourceLink(BaseModel):
    """Corps de requête pour lier une ressource existante à un projet."""
    resource_id: uuid.UUID


class ProjectResourceLinkResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    resource_id: uuid.UUID
    linked_by: Optional[uuid.UUID]
    linked_at: Optional[datetime]

    model_config = {"from_attributes": True}


class LinkedResourceResponse(ResourceResponse):
    """Ressource vue depuis un projet, avec les informations de liaison."""
    link_id: uuid.UUID
    linked_at: Optional[datetime]
    linked_by: Optional[uuid.UUID]
    linker: Optional[CreatorSummary] = None
