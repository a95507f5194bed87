"""
Tests des contraintes du schéma sur une base SQLite en mémoire :
contraintes CHECK, unicité et suppressions en cascade.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.models import Group, GroupMember, Project, ProjectResource, Resource, Student, Task, User
from app.services.student_service import delete_student


@pytest.fixture
def classroom(sqlite_session):
    """Un enseignant, un élève et un groupe dont ils sont membres, avec un projet."""
    teacher = User(email="prof@ecole.be", password_hash="x", first_name="Marie", last_name="Curie")
    sqlite_session.add(teacher)
    sqlite_session.flush()
    student = Student(teacher_id=teacher.id, first_name="Léa", last_initial="M")
    group = Group(name="Sciences 5A", created_by=teacher.id)
    sqlite_session.add_all([student, group])
    sqlite_session.flush()
    sqlite_session.add_all([
        GroupMember(group_id=group.id, user_id=teacher.id, role="teacher"),
        GroupMember(group_id=group.id, student_id=student.id, role="student"),
    ])
    project = Project(group_id=group.id, title="Herbier", created_by=teacher.id)
    sqlite_session.add(project)
    sqlite_session.commit()
    return teacher, student, group, project


def test_valeurs_par_defaut(sqlite_session, classroom):
    _, student, _, project = classroom
    assert student.status == "present"
    assert project.status == "active"


def test_statut_eleve_invalide(sqlite_session, classroom):
    teacher = classroom[0]
    sqlite_session.add(Student(teacher_id=teacher.id, first_name="Hugo", status="late"))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_tache_avec_deux_assignations_refusee(sqlite_session, classroom):
    teacher, student, _, project = classroom
    sqlite_session.add(Task(
        project_id=project.id,
        title="Récolter des feuilles",
        assignee_type="teacher",
        assignee_id=teacher.id,
        student_assignee_id=student.id,
    ))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_tache_type_incoherent_refuse(sqlite_session, classroom):
    _, student, _, project = classroom
    sqlite_session.add(Task(
        project_id=project.id,
        title="Récolter des feuilles",
        assignee_type="teacher",
        student_assignee_id=student.id,
    ))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_membre_role_et_colonne_incoherents(sqlite_session, classroom):
    _, student, group, _ = classroom
    sqlite_session.add(GroupMember(group_id=group.id, student_id=student.id, role="teacher"))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_membre_en_double_refuse(sqlite_session, classroom):
    teacher, _, group, _ = classroom
    sqlite_session.add(GroupMember(group_id=group.id, user_id=teacher.id, role="teacher"))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_suppression_groupe_en_cascade(sqlite_session, classroom):
    teacher, student, group, project = classroom
    sqlite_session.add(Task(project_id=project.id, title="T", assignee_type="student", student_assignee_id=student.id))
    sqlite_session.commit()

    sqlite_session.delete(group)
    sqlite_session.commit()
    sqlite_session.expire_all()

    assert sqlite_session.execute(select(func.count()).select_from(GroupMember)).scalar() == 0
    assert sqlite_session.execute(select(func.count()).select_from(Project)).scalar() == 0
    assert sqlite_session.execute(select(func.count()).select_from(Task)).scalar() == 0
    assert sqlite_session.get(Student, student.id) is not None


def test_suppression_eleve_desassigne_la_tache(sqlite_session, classroom):
    teacher, student, _, project = classroom
    task = Task(project_id=project.id, title="T", assignee_type="student", student_assignee_id=student.id)
    sqlite_session.add(task)
    sqlite_session.commit()
    task_id = task.id

    assert delete_student(sqlite_session, teacher.id, student.id) is True
    sqlite_session.expire_all()

    task = sqlite_session.get(Task, task_id)
    assert task is not None
    assert task.student_assignee_id is None
    assert task.assignee_type is None


def test_type_d_assignation_inconnu_refuse(sqlite_session, classroom):
    project = classroom[3]
    sqlite_session.add(Task(project_id=project.id, title="T", assignee_type="parent"))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_liaison_ressource_unique(sqlite_session, classroom):
    teacher, _, _, project = classroom
    resource = Resource(type="link", title="Wikipédia", url="https://fr.wikipedia.org", created_by=teacher.id)
    sqlite_session.add(resource)
    sqlite_session.flush()
    sqlite_session.add(ProjectResource(project_id=project.id, resource_id=resource.id, linked_by=teacher.id))
    sqlite_session.commit()

    sqlite_session.add(ProjectResource(project_id=project.id, resource_id=resource.id, linked_by=teacher.id))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_ressource_type_invalide(sqlite_session, classroom):
    sqlite_session.add(Resource(type="video", title="Cours", url="https://example.org", created_by=classroom[0].id))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()
