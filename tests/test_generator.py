import pytest
from datetime import datetime, timezone as dt_timezone
from django.contrib.auth.models import User
from django.db import DatabaseError

from roster.domain.errors import DuplicateScheduleError, IncompleteAvailabilityError, ScheduleLoadError
from roster.domain.repositories import CelebrationRepository
from roster.models import Assignment, AuditLog, Availability, Celebration, ScheduleRun, ScheduleStatus
from roster.services.generator import generate_schedule, publish_schedule, regenerate_schedule

@pytest.fixture
def coordinator(db):
    return User.objects.create_user("coord", "coord@example.com", "pw", is_staff=True)

@pytest.mark.django_db
def test_november_scenario(november, coordinator):
    result = generate_schedule(11, 2025, created_by=coordinator)
    assert len(result.assignments) == 6
    assert result.warnings == []

    run = ScheduleRun.objects.get()
    assert (run.month, run.year, run.status) == (11, 2025, ScheduleStatus.DRAFT)
    assert run.created_by == coordinator
    assert result.schedule_run_id == run.id
    assert Assignment.objects.filter(schedule_run=run).count() == 6

    c1_band = set(Assignment.objects.filter(celebration=november.c1, ministry=november.bandas).values_list("member_id", flat=True))
    assert c1_band == {november.a_vocal.id, november.a_baixo.id}

    payload = result.to_dict()
    assert payload["scheduleRunId"] == run.id
    assert len(payload["assignments"]) == 6
    assert payload["warnings"] == []

@pytest.mark.django_db
def test_duplicate_period_rejected(november, coordinator):
    generate_schedule(11, 2025, created_by=coordinator)
    with pytest.raises(DuplicateScheduleError) as exc:
        generate_schedule(11, 2025, created_by=coordinator, allow_incomplete=True)
    assert exc.value.code == "DUPLICATE_SCHEDULE"
    assert ScheduleRun.objects.count() == 1
    assert Assignment.objects.count() == 6

@pytest.mark.django_db
def test_incomplete_is_rejected_by_default(november, coordinator):
    Availability.objects.filter(member=november.b_baixo, celebration=november.c2).update(available=False)
    with pytest.raises(IncompleteAvailabilityError) as exc:
        generate_schedule(11, 2025, created_by=coordinator)
    assert len(exc.value.warnings) == 1
    assert ScheduleRun.objects.count() == 0
    assert Assignment.objects.count() == 0

@pytest.mark.django_db
def test_incomplete_allowed_persists_partial(november, coordinator):
    Availability.objects.filter(member=november.b_baixo, celebration=november.c2).delete()
    result = generate_schedule(11, 2025, created_by=coordinator, allow_incomplete=True)
    assert len(result.assignments) == 5
    assert [w.to_dict()["code"] for w in result.warnings] == ["unavailable_unconfirmed"]
    assert Assignment.objects.count() == 5

@pytest.mark.django_db
def test_only_month_celebrations_are_used(november, coordinator):
    Celebration.objects.create(starts_at=datetime(2025, 12, 7, 13, tzinfo=dt_timezone.utc), location="Templo")
    Celebration.objects.create(starts_at=datetime(2025, 10, 31, 23, 59, tzinfo=dt_timezone.utc), location="Templo")
    assert CelebrationRepository.month_range(2025, 11).count() == 2
    result = generate_schedule(11, 2025, created_by=coordinator)
    assert {a.celebration_id for a in result.assignments} == {november.c1.id, november.c2.id}

@pytest.mark.django_db
def test_ministry_filter(november, coordinator):
    result = generate_schedule(11, 2025, created_by=coordinator, ministry="Áudio")
    assert len(result.assignments) == 2
    assert set(Assignment.objects.values_list("ministry_id", flat=True)) == {november.audio.id}

@pytest.mark.django_db
def test_invalid_arguments(november, coordinator):
    with pytest.raises(ValueError):
        generate_schedule(13, 2025, created_by=coordinator)
    with pytest.raises(ValueError):
        generate_schedule(11, 2025, created_by=None)
    assert ScheduleRun.objects.count() == 0

@pytest.mark.django_db
def test_load_error_is_wrapped(november, coordinator, monkeypatch):
    from roster.domain import repositories

    def boom(cls):
        raise DatabaseError("conexão perdida")

    monkeypatch.setattr(repositories.ReferenceRepository, "profiles", classmethod(boom))
    with pytest.raises(ScheduleLoadError) as exc:
        generate_schedule(11, 2025, created_by=coordinator)
    assert "conexão perdida" in str(exc.value)
    assert isinstance(exc.value.__cause__, DatabaseError)
    assert ScheduleRun.objects.count() == 0

@pytest.mark.django_db
def test_regenerate_preserves_locked(november, coordinator):
    result = generate_schedule(11, 2025, created_by=coordinator)
    run = result.schedule_run
    locked = Assignment.objects.get(celebration=november.c1, role=november.mesa)
    locked.locked = True
    locked.save()

    regenerate_schedule(run, created_by=coordinator, preserve_locked=True)

    assert Assignment.objects.filter(schedule_run=run).count() == 6
    kept = Assignment.objects.get(pk=locked.pk)
    assert kept.locked and kept.member_id == locked.member_id
    assert Assignment.objects.filter(celebration=november.c1, role=november.mesa).count() == 1

@pytest.mark.django_db
def test_regenerate_without_preserve_keeps_locked_row(november, coordinator):
    run = generate_schedule(11, 2025, created_by=coordinator).schedule_run
    locked = Assignment.objects.get(celebration=november.c1, role=november.mesa)
    locked.locked = True
    locked.save()

    result = regenerate_schedule(run.id, created_by=coordinator, preserve_locked=False)

    # a vaga travada é recalculada, mas a linha travada não é apagada
    assert len(result.assignments) == 6
    assert Assignment.objects.filter(pk=locked.pk, locked=True).exists()
    assert Assignment.objects.filter(schedule_run=run, locked=True).count() == 1
    assert Assignment.objects.filter(schedule_run=run).count() == 7

@pytest.mark.django_db
def test_regenerate_counts_include_replaced_rows(november, coordinator):
    run = generate_schedule(11, 2025, created_by=coordinator).schedule_run
    Assignment.objects.filter(role=november.mesa).update(member=november.t1)

    result = regenerate_schedule(run, created_by=coordinator, ministry="Áudio")

    audio = sorted(
        (a for a in result.assignments if a.ministry_id == november.audio.id),
        key=lambda a: a.celebration_id,
    )
    assert [a.member_id for a in audio] == [november.t2.id, november.t2.id]

@pytest.mark.django_db
def test_regenerate_single_ministry_keeps_others(november, coordinator):
    run = generate_schedule(11, 2025, created_by=coordinator).schedule_run
    band_ids = set(Assignment.objects.filter(ministry=november.bandas).values_list("id", flat=True))

    result = regenerate_schedule(run, created_by=coordinator, ministry="Áudio")

    assert len(result.assignments) == 2
    assert set(Assignment.objects.filter(ministry=november.bandas).values_list("id", flat=True)) == band_ids
    assert Assignment.objects.filter(schedule_run=run).count() == 6

@pytest.mark.django_db
def test_publish_is_idempotent_and_audited(november, coordinator):
    run = generate_schedule(11, 2025, created_by=coordinator).schedule_run
    publish_schedule(run)
    first = run.published_at
    publish_schedule(run)
    run.refresh_from_db()
    assert run.status == ScheduleStatus.PUBLISHED
    assert run.published_at == first
    assert list(AuditLog.objects.filter(table="roster_schedulerun").values_list("action", flat=True).order_by("id")) == ["create", "publish"]

@pytest.mark.django_db
def test_lock_change_is_audited(november, coordinator):
    generate_schedule(11, 2025, created_by=coordinator)
    a = Assignment.objects.first()
    a.locked = True
    a.save(update_fields=["locked"])
    log = AuditLog.objects.get(table="roster_assignment")
    assert log.action == "lock"
    assert log.before == {"locked": False} and log.after == {"locked": True}
