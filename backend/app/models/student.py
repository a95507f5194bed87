"""
Modèle SQLAlchemy pour la table students.
Chaque élève appartient à l'enseignant qui l'a créé (teacher_id).
"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

STUDENT_STATUSES = ("present", "absent")


class Student(Base):
    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("status IN ('present', 'absent')", name="ck_students_status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_initial = Column(String(1), nullable=True)
    status = Column(String(20), nullable=False, default="present")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
