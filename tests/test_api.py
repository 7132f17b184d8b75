import pytest
from django.contrib.auth.models import User

from roster.models import Assignment, AuditLog, Availability, ScheduleRun, ScheduleStatus

GENERATE = "/api/v1/schedules/generate"

@pytest.fixture
def member_client(client, db):
    User.objects.create_user("u", "u@example.com", "pw")
    client.login(username="u", password="pw")
    return client

def _generate(c, month="2025-11", body=None, query=""):
    return c.post(f"{GENERATE}?month={month}{query}", body or {}, content_type="application/json")

@pytest.mark.django_db
def test_generate_created(admin_client, november):
    resp = _generate(admin_client)
    assert resp.status_code == 201
    data = resp.json()
    assert data["scheduleRunId"] == ScheduleRun.objects.get().id
    assert len(data["assignments"]) == 6
    assert data["warnings"] == []
    assert resp["X-Request-ID"]

@pytest.mark.django_db
def test_generate_duplicate_conflict(admin_client, november):
    assert _generate(admin_client).status_code == 201
    resp = _generate(admin_client)
    assert resp.status_code == 409
    assert resp.json()["code"] == "DUPLICATE_SCHEDULE"
    assert resp.json()["warnings"] == []

@pytest.mark.django_db
def test_generate_incomplete_then_forced(admin_client, november):
    Availability.objects.filter(member=november.t1).delete()
    Availability.objects.filter(member=november.t2, celebration=november.c2).delete()

    resp = _generate(admin_client)
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "INCOMPLETE_AVAILABILITY"
    assert [w["code"] for w in body["warnings"]] == ["no_candidate"]
    assert body["warnings"][0]["celebrationId"] == november.c2.id
    assert body["warnings"][0]["reason"] == "Nenhum membro disponível"
    assert ScheduleRun.objects.count() == 0

    resp = _generate(admin_client, query="&force=1")
    assert resp.status_code == 201
    assert len(resp.json()["warnings"]) == 1

@pytest.mark.django_db
def test_generate_force_in_body(admin_client, november):
    Availability.objects.filter(member=november.a_vocal, celebration=november.c1).update(available=False)
    resp = _generate(admin_client, body={"force": True, "preserveLocked": True})
    assert resp.status_code == 201

@pytest.mark.django_db
def test_generate_ministry_in_body(admin_client, november):
    resp = _generate(admin_client, body={"ministry": "Áudio"})
    assert resp.status_code == 201
    assert len(resp.json()["assignments"]) == 2

@pytest.mark.parametrize("month", ["2025-13", "novembro", ""])
@pytest.mark.django_db
def test_generate_bad_month(admin_client, month):
    resp = _generate(admin_client, month=month)
    assert resp.status_code == 400

@pytest.mark.django_db
def test_generate_requires_staff(member_client, november):
    assert _generate(member_client).status_code == 403
    assert ScheduleRun.objects.count() == 0

@pytest.mark.django_db
def test_generate_requires_login(client, november):
    assert _generate(client).status_code in (401, 403)

@pytest.mark.django_db
def test_by_period_visibility_and_delete(admin_client, member_client, november):
    _generate(admin_client)
    resp = admin_client.get("/api/v1/schedules/by-period?month=2025-11")
    assert resp.status_code == 200
    assert resp.json()["status"] == ScheduleStatus.DRAFT

    assert member_client.get("/api/v1/schedules/by-period?month=2025-11").status_code == 404
    assert member_client.delete("/api/v1/schedules/by-period?month=2025-11").status_code == 403

    resp = admin_client.delete("/api/v1/schedules/by-period?month=2025-11")
    assert resp.status_code == 204
    assert ScheduleRun.objects.count() == 0
    assert Assignment.objects.count() == 0
    assert admin_client.delete("/api/v1/schedules/by-period?month=2025-11").status_code == 404
    assert AuditLog.objects.filter(table="roster_schedulerun", action="delete").exists()

@pytest.mark.django_db
def test_detail_and_publish(admin_client, member_client, november):
    run_id = _generate(admin_client).json()["scheduleRunId"]

    resp = admin_client.get(f"/api/v1/schedules/{run_id}")
    assert resp.status_code == 200
    assert len(resp.json()["assignments"]) == 6
    assert {a["ministry"] for a in resp.json()["assignments"]} == {"Bandas", "Áudio"}
    assert member_client.get(f"/api/v1/schedules/{run_id}").status_code == 404

    resp = admin_client.post(f"/api/v1/schedules/{run_id}/publish")
    assert resp.status_code == 200
    assert resp.json()["status"] == ScheduleStatus.PUBLISHED
    assert resp.json()["published_at"]

    assert member_client.get(f"/api/v1/schedules/{run_id}").status_code == 200
    assert member_client.get("/api/v1/schedules/by-period?month=2025-11").status_code == 200

@pytest.mark.django_db
def test_regenerate_endpoint(admin_client, november):
    run_id = _generate(admin_client).json()["scheduleRunId"]
    resp = admin_client.post(f"/api/v1/schedules/{run_id}/regenerate", {"ministry": "Áudio"}, content_type="application/json")
    assert resp.status_code == 200
    assert len(resp.json()["assignments"]) == 2
    assert Assignment.objects.count() == 6
    assert admin_client.post("/api/v1/schedules/9999/regenerate").status_code == 404

@pytest.mark.django_db
def test_assignment_list_filters(admin_client, november):
    _generate(admin_client)
    resp = admin_client.get(f"/api/v1/assignments?ministry={november.audio.id}")
    assert resp.status_code == 200
    assert resp.json()["count"] == 2
    assert {a["role"] for a in resp.json()["results"]} == {"Mesa de som"}

    resp = admin_client.get(f"/api/v1/assignments?member={november.a_vocal.id}&limit=1")
    assert resp.json()["count"] == 1
    assert resp.json()["results"][0]["member"]["name"] == "Ana"

    assert admin_client.get("/api/v1/assignments?limit=-1").status_code == 400

@pytest.mark.django_db
def test_assignment_list_hides_drafts_from_members(admin_client, member_client, november):
    _generate(admin_client)
    assert member_client.get("/api/v1/assignments").json()["count"] == 0

@pytest.mark.django_db
def test_lock_toggle(admin_client, admin_user, november):
    _generate(admin_client)
    a = Assignment.objects.filter(role=november.mesa).first()

    resp = admin_client.post(f"/api/v1/assignments/{a.id}/lock", {"locked": True}, content_type="application/json")
    assert resp.status_code == 200
    assert resp.json()["locked"] is True
    a.refresh_from_db()
    assert a.locked

    log = AuditLog.objects.get(table="roster_assignment", action="lock")
    assert log.author == admin_user

    resp = admin_client.post(f"/api/v1/assignments/{a.id}/lock", {}, content_type="application/json")
    assert resp.status_code == 400
