"""
Schémas Pydantic pour les statistiques d'administration.
"""

from typing import Dict

from pydantic import BaseModel


class AdminStats(BaseModel):
    """Vue globale des élèves, tous enseignants confondus."""
    total_students: int
    teacher_counts: Dict[str, int]
    teacher_emails: Dict[str, str]
    status_counts: Dict[str, int]
