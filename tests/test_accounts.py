from app.core.db import session_scope
from app.core.seed import seed_demo_data
from app.models.school import SchoolClass, StudentProfile
from app.models.user import User
from app.schemas.enums import Role


# ----------------------------
# Register / login
# ----------------------------

def test_register_then_login(client, db):
    resp = client.post(
        "/v1/auth/register",
        json={"name": "Ana Cruz", "email": "Ana@School.test ", "password": "secret123"},
    )
    assert resp.status_code == 201
    user_id = resp.json()["user_id"]

    user = db.get(User, user_id)
    assert user.role == Role.STUDENT
    assert user.email == "ana@school.test"
    assert db.get(StudentProfile, user_id).student_id.startswith("STU")

    resp = client.post("/v1/auth/login", json={"email": "  ANA@school.test", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "STUDENT"

    resp = client.get("/v1/admin/profile", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert resp.json()["email"] == "ana@school.test"


def test_register_rejects_duplicates_and_short_passwords(client, student):
    resp = client.post(
        "/v1/auth/register",
        json={"name": "Copy", "email": student.email, "password": "secret123"},
    )
    assert resp.status_code == 400
    assert "already exists" in resp.json()["detail"]

    resp = client.post(
        "/v1/auth/register",
        json={"name": "Short", "email": "short@school.test", "password": "123"},
    )
    assert resp.status_code == 400


def test_login_rejects_bad_credentials(client, student):
    assert client.post("/v1/auth/login", json={"email": student.email, "password": "wrong-pass"}).status_code == 401
    assert client.post("/v1/auth/login", json={"email": "ghost@school.test", "password": "secret123"}).status_code == 401


# ----------------------------
# Admin user management
# ----------------------------

def test_admin_creates_and_lists_users(client, db, admin, auth):
    resp = client.post(
        "/v1/admin/users",
        json={
            "name": "Mr. Santos",
            "email": "santos@school.test",
            "password": "secret123",
            "role": "TEACHER",
            "student_class": "10-A",
        },
        headers=auth(admin),
    )
    assert resp.status_code == 201

    teacher = db.get(User, resp.json()["user_id"])
    assert teacher.role == Role.TEACHER
    assert teacher.student_class is None
    assert db.get(StudentProfile, teacher.id) is None

    resp = client.get("/v1/admin/users", headers=auth(admin))
    assert resp.status_code == 200
    emails = [u["email"] for u in resp.json()]
    assert emails[0] == "santos@school.test"
    assert admin.email in emails


def test_teachers_and_students_cannot_manage_users(client, teacher, student, auth):
    for caller in (teacher, student):
        assert client.get("/v1/admin/users", headers=auth(caller)).status_code == 403
        resp = client.post(
            "/v1/admin/users",
            json={"name": "X", "email": "x@school.test", "password": "secret123", "role": "ADMIN"},
            headers=auth(caller),
        )
        assert resp.status_code == 403


# ----------------------------
# Own profile
# ----------------------------

def test_profile_update_name_and_email(client, db, student, make_user, auth):
    other = make_user(Role.STUDENT)

    resp = client.put(
        "/v1/admin/profile",
        json={"name": "Ana C.", "email": other.email},
        headers=auth(student),
    )
    assert resp.status_code == 400

    resp = client.put(
        "/v1/admin/profile",
        json={"name": "Ana C.", "email": "ana.c@school.test"},
        headers=auth(student),
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Ana C."


def test_profile_password_change(client, student, auth):
    resp = client.put(
        "/v1/admin/profile",
        json={"name": "Ana", "email": student.email, "new_password": "newsecret"},
        headers=auth(student),
    )
    assert resp.status_code == 400

    resp = client.put(
        "/v1/admin/profile",
        json={"name": "Ana", "email": student.email, "current_password": "nope-nope", "new_password": "newsecret"},
        headers=auth(student),
    )
    assert resp.status_code == 400

    resp = client.put(
        "/v1/admin/profile",
        json={"name": "Ana", "email": student.email, "current_password": "secret123", "new_password": "newsecret"},
        headers=auth(student),
    )
    assert resp.status_code == 200

    resp = client.post("/v1/auth/login", json={"email": student.email, "password": "newsecret"})
    assert resp.status_code == 200


# ----------------------------
# Seed
# ----------------------------

def test_seed_is_idempotent(db, session_factory):
    for _ in range(2):
        with session_scope(session_factory) as session:
            seed_demo_data(session)

    assert db.query(SchoolClass).count() == 2
    assert db.query(User).count() == 2

    student = db.query(User).filter(User.email == "student@tracking.com").one()
    profile = db.get(StudentProfile, student.id)
    assert profile.student_id == "STU001"
    assert profile.class_id is not None
