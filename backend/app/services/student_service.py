"""
Service métier pour les élèves.
Un enseignant ne voit et ne modifie que ses propres élèves : un élève d'un
autre enseignant est traité comme inexistant.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models.group import Group, GroupMember
from app.models.project import Project, Task
from app.models.student import Student
from app.schemas.student import (
    StudentCreate,
    StudentGroupSummary,
    StudentPatch,
    StudentProfile,
    StudentProjectSummary,
    StudentReplace,
    StudentResponse,
    StudentStats,
    StudentTaskSummary,
)

logger = logging.getLogger(__name__)

STATUS_TOGGLE = {"present": "absent", "absent": "present"}


def list_students(db: Session, teacher_id: uuid.UUID) -> list[Student]:
    """Élèves de l'enseignant, triés par prénom."""
    return list(db.execute(
        select(Student)
        .where(Student.teacher_id == teacher_id)
        .order_by(Student.first_name, Student.last_initial)
    ).scalars().all())


def create_student(db: Session, teacher_id: uuid.UUID, data: StudentCreate) -> Student:
    student = Student(
        teacher_id=teacher_id,
        first_name=data.first_name,
        last_initial=data.last_initial,
        status="present",
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    logger.info("Élève créé : %s (enseignant %s)", student.id, teacher_id)
    return student


def get_student(db: Session, teacher_id: uuid.UUID, student_id: uuid.UUID) -> Optional[Student]:
    """Retourne l'élève s'il appartient à l'enseignant, sinon None."""
    student = db.get(Student, student_id)
    if student is None or student.teacher_id != teacher_id:
        return None
    return student


def replace_student(
    db: Session, teacher_id: uuid.UUID, student_id: uuid.UUID, data: StudentReplace
) -> Optional[Student]:
    student = get_student(db, teacher_id, student_id)
    if student is None:
        return None
    student.first_name = data.first_name
    student.last_initial = data.last_initial
    db.commit()
    db.refresh(student)
    return student


def patch_student(
    db: Session, teacher_id: uuid.UUID, student_id: uuid.UUID, data: StudentPatch
) -> Optional[Student]:
    """Met à jour les champs fournis. Les champs absents ne sont pas modifiés."""
    student = get_student(db, teacher_id, student_id)
    if student is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(student, field, value)

    db.commit()
    db.refresh(student)
    return student


def toggle_status(db: Session, teacher_id: uuid.UUID, student_id: uuid.UUID) -> Optional[Student]:
    """Bascule le statut present ↔ absent."""
    student = get_student(db, teacher_id, student_id)
    if student is None:
        return None
    student.status = STATUS_TOGGLE.get(student.status, "present")
    db.commit()
    db.refresh(student)
    return student


def delete_student(db: Session, teacher_id: uuid.UUID, student_id: uuid.UUID) -> bool:
    """
    Supprime un élève. Ses appartenances aux groupes sont supprimées en cascade,
    les tâches qui lui étaient assignées deviennent non assignées.
    """
    student = get_student(db, teacher_id, student_id)
    if student is None:
        return False
    db.execute(
        update(Task)
        .where(Task.student_assignee_id == student_id)
        .values(assignee_type=None, student_assignee_id=None)
    )
    db.delete(student)
    db.commit()
    logger.info("Élève supprimé : %s", student_id)
    return True


def get_student_profile(
    db: Session, teacher_id: uuid.UUID, student_id: uuid.UUID
) -> Optional[StudentProfile]:
    """
    Fiche élève : groupes, projets de ces groupes, tâches assignées et statistiques.
    """
    student = get_student(db, teacher_id, student_id)
    if student is None:
        return None

    memberships = db.execute(
        select(GroupMember, Group)
        .join(Group, Group.id == GroupMember.group_id)
        .where(
            GroupMember.student_id == student_id,
            GroupMember.role == "student",
        )
        .order_by(Group.name)
    ).all()

    groups = [
        StudentGroupSummary(
            membership_id=m.id,
            group_id=g.id,
            name=g.name,
            description=g.description,
            joined_at=m.created_at,
        )
        for m, g in memberships
    ]

    projects = []
    group_ids = [g.group_id for g in groups]
    if group_ids:
        rows = db.execute(
            select(Project, Group.name)
            .join(Group, Group.id == Project.group_id)
            .where(Project.group_id.in_(group_ids))
            .order_by(Project.created_at.desc())
        ).all()
        projects = [
            StudentProjectSummary(
                id=p.id,
                title=p.title,
                description=p.description,
                status=p.status,
                group_id=p.group_id,
                group_name=group_name,
                created_at=p.created_at,
            )
            for p, group_name in rows
        ]

    task_rows = db.execute(
        select(Task, Project, Group.name)
        .join(Project, Project.id == Task.project_id)
        .join(Group, Group.id == Project.group_id)
        .where(Task.student_assignee_id == student_id)
        .order_by(Task.updated_at.desc())
    ).all()
    tasks = [
        StudentTaskSummary(
            id=t.id,
            title=t.title,
            description=t.description,
            status=t.status,
            project_id=p.id,
            project_title=p.title,
            group_id=p.group_id,
            group_name=group_name,
            updated_at=t.updated_at,
        )
        for t, p, group_name in task_rows
    ]

    return StudentProfile(
        student=StudentResponse.model_validate(student),
        groups=groups,
        projects=projects,
        tasks=tasks,
        stats=compute_stats(tasks),
    )


def compute_stats(tasks: list[StudentTaskSummary]) -> StudentStats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == "completed")
    in_progress = sum(1 for t in tasks if t.status == "in-progress")
    todo = sum(1 for t in tasks if t.status == "todo")
    return StudentStats(
        total_tasks=total,
        completed_tasks=completed,
        in_progress_tasks=in_progress,
        todo_tasks=todo,
        completion_rate=round(completed * 100 / total) if total else 0,
    )
