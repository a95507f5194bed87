"""
Service métier pour les ressources (liens, images) et leur liaison aux projets.

Visibilité d'une ressource pour un enseignant :
- ressources globales (ni groupe ni élève)
- ressources des groupes où il enseigne
- ressources de ses élèves
- ressources qu'il a créées
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.exceptions import ConflictError, ForbiddenError, InvalidDataError, NotFoundError
from app.models.resource import ProjectResource, Resource
from app.models.student import Student
from app.models.user import User
from app.schemas.resource import (
    CreatorSummary,
    LinkedResourceResponse,
    ProjectResourceLinkResponse,
    ResourceCreate,
    ResourceResponse,
    ResourceUpdate,
    is_valid_link_url,
)
from app.services.permissions import (
    is_teacher_anywhere,
    load_project_for_teacher,
    require_group_teacher,
    teacher_group_ids,
)

logger = logging.getLogger(__name__)

# Valeurs spéciales du filtre group_id
GROUP_FILTER_ALL = "all"
GROUP_FILTER_GLOBAL = "global"


def _visibility_clause(db: Session, user_id: uuid.UUID):
    group_ids = teacher_group_ids(db, user_id)
    own_students = select(Student.id).where(Student.teacher_id == user_id)
    return or_(
        and_(Resource.group_id.is_(None), Resource.student_id.is_(None)),
        Resource.group_id.in_(group_ids),
        Resource.student_id.in_(own_students),
        Resource.created_by == user_id,
    )


def _get_visible_resource(db: Session, user_id: uuid.UUID, resource_id: uuid.UUID) -> Optional[Resource]:
    """Charge la ressource si l'utilisateur peut la voir, sinon None."""
    return db.execute(
        select(Resource)
        .where(Resource.id == resource_id, _visibility_clause(db, user_id))
    ).scalar()


def list_resources(
    db: Session,
    user_id: uuid.UUID,
    group_filter: Optional[str] = None,
    resource_type: Optional[str] = None,
    search: Optional[str] = None,
) -> list[ResourceResponse]:
    """
    Ressources visibles, de la plus récente à la plus ancienne.

    group_filter : 'all' (ou absent), 'global', ou l'UUID d'un groupe.
    search : recherche insensible à la casse dans le titre, la description et l'URL.
    """
    query = (
        select(Resource, User)
        .outerjoin(User, User.id == Resource.created_by)
        .where(_visibility_clause(db, user_id))
        .order_by(Resource.created_at.desc())
    )

    if group_filter and group_filter != GROUP_FILTER_ALL:
        if group_filter == GROUP_FILTER_GLOBAL:
            query = query.where(Resource.group_id.is_(None), Resource.student_id.is_(None))
        else:
            try:
                group_id = uuid.UUID(group_filter)
            except ValueError:
                raise InvalidDataError("Filtre de groupe invalide.")
            query = query.where(Resource.group_id == group_id)

    if resource_type:
        query = query.where(Resource.type == resource_type.strip().lower())

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            Resource.title.ilike(pattern),
            Resource.description.ilike(pattern),
            Resource.url.ilike(pattern),
        ))

    return [_to_response(r, creator) for r, creator in db.execute(query).all()]


def create_resource(db: Session, user_id: uuid.UUID, data: ResourceCreate) -> ResourceResponse:
    """
    Crée une ressource.

    Validations :
    1. L'utilisateur enseigne dans au moins un groupe
    2. Si un groupe est ciblé, il y enseigne
    3. Si un élève est ciblé, c'est un de ses élèves
    """
    if not is_teacher_anywhere(db, user_id):
        raise ForbiddenError("Seuls les enseignants peuvent créer des ressources.")
    if data.group_id is not None:
        require_group_teacher(db, data.group_id, user_id, "Vous n'avez pas accès à ce groupe.")
    if data.student_id is not None:
        _require_own_student(db, user_id, data.student_id)

    resource = Resource(
        type=data.type,
        title=data.title,
        description=data.description,
        url=data.url,
        group_id=data.group_id,
        student_id=data.student_id,
        created_by=user_id,
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info("Ressource créée : %s (%s)", resource.id, resource.type)
    return _to_response(resource, db.get(User, user_id))


def get_resource(db: Session, user_id: uuid.UUID, resource_id: uuid.UUID) -> Optional[ResourceResponse]:
    """Retourne une ressource visible par l'utilisateur, sinon None."""
    row = db.execute(
        select(Resource, User)
        .outerjoin(User, User.id == Resource.created_by)
        .where(Resource.id == resource_id, _visibility_clause(db, user_id))
    ).first()
    if row is None:
        return None
    return _to_response(*row)


def update_resource(
    db: Session, user_id: uuid.UUID, resource_id: uuid.UUID, data: ResourceUpdate
) -> Optional[ResourceResponse]:
    """
    Met à jour les champs fournis.
    Le format de l'URL est vérifié pour les liens (type enregistré ou nouveau type).
    """
    resource = _get_visible_resource(db, user_id, resource_id)
    if resource is None:
        return None
    _require_edit_rights(db, user_id, resource, "Seuls les enseignants peuvent modifier des ressources.")

    update_data = data.model_dump(exclude_unset=True)
    for field in ("type", "title", "url"):
        if field in update_data and update_data[field] is None:
            raise InvalidDataError(f"Le champ '{field}' ne peut pas être nul.")

    new_type = update_data.get("type", resource.type)
    new_url = update_data.get("url", resource.url)
    if new_type == "link" and ("url" in update_data or "type" in update_data):
        if not is_valid_link_url(new_url):
            raise InvalidDataError("Format d'URL invalide.")

    new_group = update_data.get("group_id")
    if new_group is not None and new_group != resource.group_id:
        require_group_teacher(db, new_group, user_id, "Vous n'avez pas accès au groupe indiqué.")

    for field, value in update_data.items():
        setattr(resource, field, value)

    db.commit()
    db.refresh(resource)
    creator = db.get(User, resource.created_by) if resource.created_by else None
    return _to_response(resource, creator)


def delete_resource(db: Session, user_id: uuid.UUID, resource_id: uuid.UUID) -> bool:
    resource = _get_visible_resource(db, user_id, resource_id)
    if resource is None:
        return False
    _require_edit_rights(db, user_id, resource, "Seuls les enseignants peuvent supprimer des ressources.")
    db.delete(resource)
    db.commit()
    logger.info("Ressource supprimée : %s", resource_id)
    return True


# --- Liaison projet ↔ ressource ---

def list_project_resources(
    db: Session, user_id: uuid.UUID, project_id: uuid.UUID
) -> list[LinkedResourceResponse]:
    """Ressources liées au projet, de la plus récemment liée à la plus ancienne."""
    load_project_for_teacher(db, project_id, user_id)

    creator = aliased(User)
    linker = aliased(User)
    rows = db.execute(
        select(ProjectResource, Resource, creator, linker)
        .join(Resource, Resource.id == ProjectResource.resource_id)
        .outerjoin(creator, creator.id == Resource.created_by)
        .outerjoin(linker, linker.id == ProjectResource.linked_by)
        .where(ProjectResource.project_id == project_id)
        .order_by(ProjectResource.linked_at.desc())
    ).all()

    return [
        LinkedResourceResponse(
            **_to_response(resource, creator_user).model_dump(),
            link_id=link.id,
            linked_at=link.linked_at,
            linked_by=link.linked_by,
            linker=_person(linker_user),
        )
        for link, resource, creator_user, linker_user in rows
    ]


def link_resource(
    db: Session, user_id: uuid.UUID, project_id: uuid.UUID, resource_id: uuid.UUID
) -> ProjectResourceLinkResponse:
    """Lie une ressource existante à un projet. ConflictError si déjà liée."""
    load_project_for_teacher(db, project_id, user_id)
    if _get_visible_resource(db, user_id, resource_id) is None:
        raise NotFoundError("Ressource introuvable.")

    existing = db.execute(
        select(ProjectResource.id)
        .where(
            ProjectResource.project_id == project_id,
            ProjectResource.resource_id == resource_id,
        )
    ).scalar()
    if existing is not None:
        raise ConflictError("Cette ressource est déjà liée à ce projet.")

    link = ProjectResource(project_id=project_id, resource_id=resource_id, linked_by=user_id)
    db.add(link)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Cette ressource est déjà liée à ce projet.")
    db.refresh(link)
    logger.info("Ressource %s liée au projet %s", resource_id, project_id)
    return ProjectResourceLinkResponse.model_validate(link)


def unlink_resource(db: Session, user_id: uuid.UUID, project_id: uuid.UUID, resource_id: uuid.UUID) -> bool:
    """Supprime la liaison. Retourne False si elle n'existait pas."""
    load_project_for_teacher(db, project_id, user_id)
    link = db.execute(
        select(ProjectResource)
        .where(
            ProjectResource.project_id == project_id,
            ProjectResource.resource_id == resource_id,
        )
    ).scalar()
    if link is None:
        return False
    db.delete(link)
    db.commit()
    return True


def _require_edit_rights(db: Session, user_id: uuid.UUID, resource: Resource, message: str) -> None:
    if not is_teacher_anywhere(db, user_id):
        raise ForbiddenError(message)
    if resource.group_id is not None:
        require_group_teacher(db, resource.group_id, user_id, "Vous n'avez pas accès à la ressource de ce groupe.")


def _require_own_student(db: Session, user_id: uuid.UUID, student_id: uuid.UUID) -> None:
    student = db.get(Student, student_id)
    if student is None or student.teacher_id != user_id:
        raise NotFoundError("Élève introuvable.")


def _person(user: Optional[User]) -> Optional[CreatorSummary]:
    if user is None:
        return None
    return CreatorSummary(
        id=user.id,
        first_name=user.first_name or "Inconnu",
        last_name=user.last_name or "",
        email=user.email,
    )


def _to_response(resource: Resource, creator: Optional[User]) -> ResourceResponse:
    return ResourceResponse(
        id=resource.id,
        type=resource.type,
        title=resource.title,
        description=resource.description,
        url=resource.url,
        group_id=resource.group_id,
        student_id=resource.student_id,
        created_by=resource.created_by,
        creator=_person(creator),
        created_at=resource.created_at,
        updated_at=resource.updated_at,
    )
