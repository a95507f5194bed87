"""
Tests unitaires pour le service de statistiques d'administration.
"""

import uuid
from unittest.mock import MagicMock

from app.services.admin_service import get_stats


def make_db(student_rows, email_rows):
    db = MagicMock()
    first, second = MagicMock(), MagicMock()
    first.all.return_value = student_rows
    second.all.return_value = email_rows
    db.execute.side_effect = [first, second]
    return db


def test_get_stats_aucun_eleve():
    db = MagicMock()
    db.execute.return_value.all.return_value = []

    stats = get_stats(db)

    assert stats.total_students == 0
    assert stats.teacher_counts == {}
    assert stats.teacher_emails == {}
    assert stats.status_counts == {"present": 0, "absent": 0}
    assert db.execute.call_count == 1


def test_get_stats_par_enseignant_et_par_statut():
    marie, paul = uuid.uuid4(), uuid.uuid4()
    rows = [(marie, "present"), (marie, "absent"), (paul, "present")]
    db = make_db(rows, [(marie, "marie@ecole.be"), (paul, "paul@ecole.be")])

    stats = get_stats(db)

    assert stats.total_students == 3
    assert stats.teacher_counts == {str(marie): 2, str(paul): 1}
    assert stats.teacher_emails[str(paul)] == "paul@ecole.be"
    assert stats.status_counts == {"present": 2, "absent": 1}
