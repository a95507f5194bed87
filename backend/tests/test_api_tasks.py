"""
Tests d'intégration API pour les tâches d'un projet.
"""

import uuid
from datetime import datetime
from unittest.mock import patch

from app.exceptions import ForbiddenError, InvalidDataError
from app.schemas.project import TaskAssignee, TaskResponse


# --- Helpers ---

def make_task_response(**kwargs) -> TaskResponse:
    return TaskResponse(
        id=kwargs.get("id", uuid.uuid4()),
        project_id=kwargs.get("project_id", uuid.uuid4()),
        title=kwargs.get("title", "Récolter des feuilles"),
        description=None,
        status=kwargs.get("status", "todo"),
        assignee_type=kwargs.get("assignee_type"),
        assignee_id=kwargs.get("assignee_id"),
        student_assignee_id=kwargs.get("student_assignee_id"),
        assignee=kwargs.get("assignee"),
        created_at=datetime.now(),
        updated_at=datetime.now(),
    )


def tasks_url(project_id=None):
    return f"/api/v1/projects/{project_id or uuid.uuid4()}/tasks"


# ============================================================
# GET /tasks
# ============================================================

def test_list_tasks_avec_assignation(client):
    student_id = uuid.uuid4()
    with patch("app.routers.projects.task_service.list_tasks") as mock:
        mock.return_value = [
            make_task_response(
                assignee_type="student",
                student_assignee_id=student_id,
                assignee=TaskAssignee(id=student_id, role="student", first_name="Léa", last_initial="M"),
            ),
            make_task_response(),
        ]
        response = client.get(tasks_url())

    assert response.status_code == 200
    data = response.json()
    assert data[0]["assignee"]["role"] == "student"
    assert data[0]["assignee"]["last_initial"] == "M"
    assert data[1]["assignee"] is None


def test_list_tasks_non_membre(client):
    with patch("app.routers.projects.task_service.list_tasks") as mock:
        mock.side_effect = ForbiddenError("Vous n'avez pas accès à ce projet.")
        response = client.get(tasks_url())

    assert response.status_code == 403


# ============================================================
# POST /tasks
# ============================================================

def test_create_task_succes(client):
    teacher_id = uuid.uuid4()
    with patch("app.routers.projects.task_service.create_task") as mock:
        mock.return_value = make_task_response(assignee_type="teacher", assignee_id=teacher_id)
        response = client.post(
            tasks_url(),
            json={"title": "Récolter des feuilles", "assignee_type": "teacher", "assignee_id": str(teacher_id)},
        )

    assert response.status_code == 201
    assert response.json()["assignee_id"] == str(teacher_id)
    assert response.json()["student_assignee_id"] is None


def test_create_task_deux_assignations_rejetee(client):
    """Enseignant et élève à la fois → 400 sans appeler le service."""
    with patch("app.routers.projects.task_service.create_task") as mock:
        response = client.post(
            tasks_url(),
            json={
                "title": "Récolter des feuilles",
                "assignee_id": str(uuid.uuid4()),
                "student_assignee_id": str(uuid.uuid4()),
            },
        )

    assert response.status_code == 400
    mock.assert_not_called()


def test_create_task_type_incoherent(client):
    response = client.post(
        tasks_url(),
        json={"title": "T", "assignee_type": "student", "assignee_id": str(uuid.uuid4())},
    )
    assert response.status_code == 400


def test_create_task_statut_invalide(client):
    response = client.post(tasks_url(), json={"title": "T", "status": "blocked"})
    assert response.status_code == 400


def test_create_task_non_membre_du_groupe(client):
    """Un enseignant qui n'enseigne pas dans le groupe ne peut pas créer de tâche."""
    with patch("app.routers.projects.task_service.create_task") as mock:
        mock.side_effect = ForbiddenError("Vous n'avez pas accès à ce projet.")
        response = client.post(tasks_url(), json={"title": "T"})

    assert response.status_code == 403


def test_create_task_assigne_hors_groupe(client):
    with patch("app.routers.projects.task_service.create_task") as mock:
        mock.side_effect = InvalidDataError("L'élève assigné n'est pas membre de ce groupe.")
        response = client.post(tasks_url(), json={"title": "T", "student_assignee_id": str(uuid.uuid4())})

    assert response.status_code == 400
    assert "membre" in response.json()["detail"]


# ============================================================
# GET / PUT / DELETE /tasks/{id}
# ============================================================

def test_get_task_introuvable(client):
    with patch("app.routers.projects.task_service.get_task") as mock:
        mock.return_value = None
        response = client.get(f"{tasks_url()}/{uuid.uuid4()}")

    assert response.status_code == 404


def test_update_task_statut(client):
    with patch("app.routers.projects.task_service.update_task") as mock:
        mock.return_value = make_task_response(status="in-progress")
        response = client.put(f"{tasks_url()}/{uuid.uuid4()}", json={"status": "in-progress"})

    assert response.status_code == 200
    assert response.json()["status"] == "in-progress"
    assert mock.call_args.args[4].touches_assignee is False


def test_update_task_desassignation_explicite(client):
    """assignee_type null est transmis au service comme une demande de désassignation."""
    with patch("app.routers.projects.task_service.update_task") as mock:
        mock.return_value = make_task_response()
        response = client.put(f"{tasks_url()}/{uuid.uuid4()}", json={"assignee_type": None})

    assert response.status_code == 200
    assert mock.call_args.args[4].touches_assignee is True


def test_update_task_corps_vide(client):
    response = client.put(f"{tasks_url()}/{uuid.uuid4()}", json={})
    assert response.status_code == 400


def test_delete_task_succes(client):
    with patch("app.routers.projects.task_service.delete_task") as mock:
        mock.return_value = True
        response = client.delete(f"{tasks_url()}/{uuid.uuid4()}")

    assert response.status_code == 204


def test_delete_task_introuvable(client):
    with patch("app.routers.projects.task_service.delete_task") as mock:
        mock.return_value = False
        response = client.delete(f"{tasks_url()}/{uuid.uuid4()}")

    assert response.status_code == 404
