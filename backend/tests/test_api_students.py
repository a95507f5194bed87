"""
Tests d'intégration API pour les élèves.
Testent les URLs, les codes HTTP, la validation et le format des réponses.
"""

import uuid
from datetime import datetime
from unittest.mock import MagicMock, patch

from app.models.student import Student
from app.schemas.student import StudentProfile, StudentResponse, StudentStats


# --- Helpers ---

def make_student(**kwargs) -> Student:
    s = MagicMock(spec=Student)
    s.id = kwargs.get("id", uuid.uuid4())
    s.teacher_id = kwargs.get("teacher_id", uuid.uuid4())
    s.first_name = kwargs.get("first_name", "Léa")
    s.last_initial = kwargs.get("last_initial", "M")
    s.status = kwargs.get("status", "present")
    s.created_at = kwargs.get("created_at", datetime.now())
    return s


# ============================================================
# GET /api/v1/students
# ============================================================

def test_list_students_succes(client, current_user):
    """Liste des élèves de l'enseignant connecté → 200."""
    with patch("app.routers.students.student_service.list_students") as mock:
        mock.return_value = [make_student(first_name="Adam"), make_student(first_name="Zoé")]
        response = client.get("/api/v1/students")

    assert response.status_code == 200
    assert [s["first_name"] for s in response.json()] == ["Adam", "Zoé"]
    mock.assert_called_once()
    assert mock.call_args.args[1] == current_user.id


# ============================================================
# POST /api/v1/students
# ============================================================

def test_create_student_succes(client):
    """Création valide → 201, statut present par défaut."""
    with patch("app.routers.students.student_service.create_student") as mock:
        mock.return_value = make_student(first_name="Alice", last_initial="B")
        response = client.post("/api/v1/students", json={"first_name": "Alice", "last_initial": "bernard"})

    assert response.status_code == 201
    assert response.json()["first_name"] == "Alice"
    assert response.json()["status"] == "present"
    data = mock.call_args.args[2]
    assert data.last_initial == "B"


def test_create_student_prenom_vide(client):
    """Prénom vide → 400."""
    response = client.post("/api/v1/students", json={"first_name": "   "})
    assert response.status_code == 400


def test_create_student_body_manquant(client):
    response = client.post("/api/v1/students")
    assert response.status_code == 400


# ============================================================
# GET /api/v1/students/{id}
# ============================================================

def test_get_student_succes(client):
    sid = uuid.uuid4()
    with patch("app.routers.students.student_service.get_student") as mock:
        mock.return_value = make_student(id=sid)
        response = client.get(f"/api/v1/students/{sid}")

    assert response.status_code == 200
    assert response.json()["id"] == str(sid)


def test_get_student_autre_enseignant(client):
    """Élève d'un autre enseignant → 404 (invisible)."""
    with patch("app.routers.students.student_service.get_student") as mock:
        mock.return_value = None
        response = client.get(f"/api/v1/students/{uuid.uuid4()}")

    assert response.status_code == 404


def test_get_student_uuid_invalide(client):
    response = client.get("/api/v1/students/pas-un-uuid")
    assert response.status_code == 400


# ============================================================
# PUT / PATCH /api/v1/students/{id}
# ============================================================

def test_replace_student_succes(client):
    sid = uuid.uuid4()
    with patch("app.routers.students.student_service.replace_student") as mock:
        mock.return_value = make_student(id=sid, first_name="Hugo", last_initial="D")
        response = client.put(f"/api/v1/students/{sid}", json={"first_name": "Hugo", "last_initial": "d"})

    assert response.status_code == 200
    assert response.json()["last_initial"] == "D"


def test_replace_student_initiale_manquante(client):
    """PUT exige le prénom ET l'initiale → 400."""
    response = client.put(f"/api/v1/students/{uuid.uuid4()}", json={"first_name": "Hugo"})
    assert response.status_code == 400


def test_patch_student_statut(client):
    sid = uuid.uuid4()
    with patch("app.routers.students.student_service.patch_student") as mock:
        mock.return_value = make_student(id=sid, status="absent")
        response = client.patch(f"/api/v1/students/{sid}", json={"status": "absent"})

    assert response.status_code == 200
    assert response.json()["status"] == "absent"


def test_patch_student_statut_invalide(client):
    """Statut hors enum → 400."""
    response = client.patch(f"/api/v1/students/{uuid.uuid4()}", json={"status": "late"})
    assert response.status_code == 400


def test_patch_student_corps_vide(client):
    """Aucune modification → 400."""
    response = client.patch(f"/api/v1/students/{uuid.uuid4()}", json={})
    assert response.status_code == 400


def test_patch_student_initiale_nulle(client):
    """{"last_initial": null} efface l'initiale : le champ est transmis au service."""
    with patch("app.routers.students.student_service.patch_student") as mock:
        mock.return_value = make_student(last_initial=None)
        response = client.patch(f"/api/v1/students/{uuid.uuid4()}", json={"last_initial": None})

    assert response.status_code == 200
    assert response.json()["last_initial"] is None
    assert mock.call_args.args[3].model_dump(exclude_unset=True) == {"last_initial": None}


def test_patch_student_prenom_nul(client):
    response = client.patch(f"/api/v1/students/{uuid.uuid4()}", json={"first_name": None})
    assert response.status_code == 400


def test_patch_student_introuvable(client):
    with patch("app.routers.students.student_service.patch_student") as mock:
        mock.return_value = None
        response = client.patch(f"/api/v1/students/{uuid.uuid4()}", json={"first_name": "X"})

    assert response.status_code == 404


# ============================================================
# POST /api/v1/students/{id}/toggle-status
# ============================================================

def test_toggle_status_succes(client):
    sid = uuid.uuid4()
    with patch("app.routers.students.student_service.toggle_status") as mock:
        mock.return_value = make_student(id=sid, status="absent")
        response = client.post(f"/api/v1/students/{sid}/toggle-status")

    assert response.status_code == 200
    assert response.json()["status"] == "absent"


# ============================================================
# DELETE /api/v1/students/{id}
# ============================================================

def test_delete_student_succes(client):
    with patch("app.routers.students.student_service.delete_student") as mock:
        mock.return_value = True
        response = client.delete(f"/api/v1/students/{uuid.uuid4()}")

    assert response.status_code == 204
    assert response.content == b""


def test_delete_student_introuvable(client):
    with patch("app.routers.students.student_service.delete_student") as mock:
        mock.return_value = False
        response = client.delete(f"/api/v1/students/{uuid.uuid4()}")

    assert response.status_code == 404
    assert "introuvable" in response.json()["detail"].lower()


# ============================================================
# GET /api/v1/students/{id}/profile
# ============================================================

def test_student_profile_succes(client):
    sid = uuid.uuid4()
    profile = StudentProfile(
        student=StudentResponse(
            id=sid, teacher_id=uuid.uuid4(), first_name="Léa",
            last_initial="M", status="present", created_at=datetime.now(),
        ),
        groups=[],
        projects=[],
        tasks=[],
        stats=StudentStats(total_tasks=0, completed_tasks=0, in_progress_tasks=0,
                           todo_tasks=0, completion_rate=0),
    )
    with patch("app.routers.students.student_service.get_student_profile") as mock:
        mock.return_value = profile
        response = client.get(f"/api/v1/students/{sid}/profile")

    assert response.status_code == 200
    assert response.json()["student"]["id"] == str(sid)
    assert response.json()["stats"]["completion_rate"] == 0


def test_student_profile_introuvable(client):
    with patch("app.routers.students.student_service.get_student_profile") as mock:
        mock.return_value = None
        response = client.get(f"/api/v1/students/{uuid.uuid4()}/profile")

    assert response.status_code == 404
