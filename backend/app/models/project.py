"""
Modèles SQLAlchemy pour les projets et leurs tâches.
"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

PROJECT_STATUSES = ("active", "completed", "archived")
TASK_STATUSES = ("todo", "in-progress", "completed")
ASSIGNEE_TYPES = ("teacher", "student")


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'completed', 'archived')", name="ck_projects_status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    group_id = Column(UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Task(Base):
    """
    Tâche d'un projet. Assignée au plus à un enseignant (assignee_id)
    OU à un élève (student_assignee_id), discriminé par assignee_type.
    """
    __tablename__ = "project_tasks"
    __table_args__ = (
        CheckConstraint("status IN ('todo', 'in-progress', 'completed')", name="ck_project_tasks_status"),
        CheckConstraint(
            "assignee_id IS NULL OR student_assignee_id IS NULL",
            name="ck_project_tasks_single_assignee",
        ),
        CheckConstraint(
            "(assignee_type IS NULL OR assignee_type IN ('teacher', 'student'))"
            " AND (assignee_id IS NULL OR assignee_type = 'teacher')"
            " AND (student_assignee_id IS NULL OR assignee_type = 'student')",
            name="ck_project_tasks_assignee_type",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="todo")
    assignee_type = Column(String(20), nullable=True)
    assignee_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    student_assignee_id = Column(
        UUID(as_uuid=True), ForeignKey("students.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
