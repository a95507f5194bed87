"""
Modèles SQLAlchemy pour les groupes et leurs membres.
"""

import uuid
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

MEMBER_ROLES = ("teacher", "student")


class Group(Base):
    __tablename__ = "groups"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class GroupMember(Base):
    """
    Appartenance d'un enseignant (user_id) ou d'un élève (student_id) à un groupe.
    Exactement une des deux colonnes est renseignée, selon le rôle.
    """
    __tablename__ = "group_members"
    __table_args__ = (
        CheckConstraint(
            "(role = 'teacher' AND user_id IS NOT NULL AND student_id IS NULL)"
            " OR (role = 'student' AND student_id IS NOT NULL AND user_id IS NULL)",
            name="ck_group_members_role_target",
        ),
        UniqueConstraint("group_id", "user_id", name="uq_group_members_user"),
        UniqueConstraint("group_id", "student_id", name="uq_group_members_student"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    group_id = Column(UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=True)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
