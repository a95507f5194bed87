"""
Statistiques globales pour l'administration : élèves par enseignant et par statut.
"""

import logging
from collections import Counter

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.student import STUDENT_STATUSES, Student
from app.models.user import User
from app.schemas.admin import AdminStats

logger = logging.getLogger(__name__)


def get_stats(db: Session) -> AdminStats:
    rows = db.execute(select(Student.teacher_id, Student.status)).all()

    teacher_counts = Counter(str(teacher_id) for teacher_id, _ in rows)
    status_counts = {status: 0 for status in STUDENT_STATUSES}
    for _, status in rows:
        if status:
            status_counts[status] = status_counts.get(status, 0) + 1

    teacher_emails = {}
    if teacher_counts:
        teacher_emails = {
            str(user_id): email
            for user_id, email in db.execute(
                select(User.id, User.email)
                .where(User.id.in_([r[0] for r in rows]))
            ).all()
        }

    logger.info("Statistiques admin : %d élèves, %d enseignants", len(rows), len(teacher_counts))
    return AdminStats(
        total_students=len(rows),
        teacher_counts=dict(teacher_counts),
        teacher_emails=teacher_emails,
        status_counts=status_counts,
    )
