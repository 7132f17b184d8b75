from __future__ import annotations

from typing import Collection, Iterable, List, Optional

from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from roster.domain.errors import DuplicateScheduleError
from roster.domain.models import (
    Assignment,
    Availability,
    Band,
    BandMember,
    Celebration,
    Ministry,
    MinistryMembership,
    Profile,
    Role,
    ScheduleRun,
    ScheduleStatus,
)
from roster.services.calendar import month_bounds_utc

# ==========================================================
# Celebration Repository
# ==========================================================
class CelebrationRepository:
    """Repositório para operações relacionadas a Celebration."""

    @classmethod
    def month_range(cls, year: int, month: int) -> QuerySet[Celebration]:
        """Retorna as celebrações do mês (limites em UTC), em ordem cronológica.

        Args:
            year (int): O ano a ser considerado.
            month (int): O mês a ser considerado.

        Returns:
            QuerySet[Celebration]: As celebrações do mês.
        """
        start, end = month_bounds_utc(year, month)
        return (
            Celebration.objects
            .filter(starts_at__gte=start, starts_at__lte=end)
            .order_by("starts_at", "id")
        )

# ==========================================================
# Reference Repository (cadastros lidos em bloco)
# ==========================================================
class ReferenceRepository:
    """Leituras completas dos cadastros usados pela geração."""

    @classmethod
    def profiles(cls) -> List[Profile]:
        return list(Profile.objects.all().order_by("id"))

    @classmethod
    def ministries(cls) -> List[Ministry]:
        return list(Ministry.objects.all().order_by("id"))

    @classmethod
    def roles(cls) -> List[Role]:
        return list(Role.objects.all().order_by("id"))

    @classmethod
    def active_bands(cls) -> List[Band]:
        return list(Band.objects.filter(active=True).order_by("name", "id"))

    @classmethod
    def band_members(cls) -> List[BandMember]:
        return list(BandMember.objects.all().order_by("band_id", "id"))

    @classmethod
    def memberships(cls) -> List[MinistryMembership]:
        return list(MinistryMembership.objects.all().order_by("id"))

    @classmethod
    def availabilities(cls, celebration_ids: Optional[Collection[int]] = None) -> List[Availability]:
        """Retorna as disponibilidades, opcionalmente só das celebrações informadas.

        Args:
            celebration_ids (Optional[Collection[int]], optional): Celebrações de interesse. Defaults to None.

        Returns:
            List[Availability]: As disponibilidades declaradas.
        """
        qs = Availability.objects.all()
        if celebration_ids is not None:
            qs = qs.filter(celebration_id__in=list(celebration_ids))
        return list(qs.order_by("id"))

# ==========================================================
# Ministry Repository
# ==========================================================
class MinistryRepository:
    """Repositório para operações relacionadas a Ministry."""

    @classmethod
    def by_name(cls, name: str) -> Optional[Ministry]:
        """Busca um ministério pelo nome exato."""
        return Ministry.objects.filter(name=name).first()

# ==========================================================
# ScheduleRun Repository
# ==========================================================
class ScheduleRunRepository:
    """Repositório para operações relacionadas a ScheduleRun."""

    @classmethod
    def by_period(cls, month: int, year: int) -> Optional[ScheduleRun]:
        """Retorna a escala do período, se existir.

        Args:
            month (int): O mês da escala.
            year (int): O ano da escala.

        Returns:
            Optional[ScheduleRun]: A escala do período ou None.
        """
        return ScheduleRun.objects.filter(month=month, year=year).first()

    @classmethod
    def create(cls, month: int, year: int, created_by: Optional[User]) -> ScheduleRun:
        """Cria a escala em rascunho.

        A restrição única (month, year) garante que duas gerações simultâneas do
        mesmo período não criem duas escalas.

        Raises:
            DuplicateScheduleError: Se o período já tiver uma escala.
        """
        try:
            with transaction.atomic():
                return ScheduleRun.objects.create(
                    month=month, year=year, status=ScheduleStatus.DRAFT, created_by=created_by
                )
        except IntegrityError as exc:
            raise DuplicateScheduleError(month, year) from exc

    @classmethod
    def publish(cls, run: ScheduleRun) -> ScheduleRun:
        """Publica a escala (idempotente)."""
        if run.status == ScheduleStatus.PUBLISHED:
            return run
        run.status = ScheduleStatus.PUBLISHED
        run.published_at = timezone.now()
        run.save(update_fields=["status", "published_at"])
        return run

# ==========================================================
# Assignment Repository
# ==========================================================
class AssignmentRepository:
    """Repositório para operações relacionadas a Assignment."""

    @classmethod
    def for_run(cls, run: ScheduleRun) -> QuerySet[Assignment]:
        """Retorna as atribuições de uma escala, em ordem cronológica."""
        return (
            Assignment.objects
            .filter(schedule_run=run)
            .select_related("celebration", "ministry", "role", "member")
            .order_by("celebration__starts_at", "ministry__name", "role__name", "id")
        )

    @classmethod
    def sweep_qs(
        cls,
        run: ScheduleRun,
        *,
        ministry_ids: Optional[Iterable[int]] = None,
    ) -> QuerySet[Assignment]:
        """Atribuições não travadas que uma nova geração substitui.

        Args:
            run (ScheduleRun): A escala alvo.
            ministry_ids (Optional[Iterable[int]], optional): Restringe aos ministérios informados. Defaults to None.

        Returns:
            QuerySet[Assignment]: As atribuições a remover.
        """
        qs = Assignment.objects.filter(schedule_run=run, locked=False)
        if ministry_ids is not None:
            qs = qs.filter(ministry_id__in=list(ministry_ids))
        return qs

    @classmethod
    def delete_for_run(
        cls,
        run: ScheduleRun,
        *,
        ministry_ids: Optional[Iterable[int]] = None,
    ) -> int:
        deleted, _ = cls.sweep_qs(run, ministry_ids=ministry_ids).delete()
        return deleted

    @classmethod
    def bulk_insert(cls, run: ScheduleRun, rows: Iterable) -> List[Assignment]:
        """Insere as atribuições planejadas na escala."""
        objs = [
            Assignment(
                schedule_run=run,
                celebration_id=r.celebration_id,
                ministry_id=r.ministry_id,
                role_id=r.role_id,
                member_id=r.member_id,
                locked=r.locked,
            )
            for r in rows
        ]
        if not objs:
            return []
        return Assignment.objects.bulk_create(objs)

    @classmethod
    def set_locked(cls, assignment: Assignment, locked: bool) -> Assignment:
        if assignment.locked != locked:
            assignment.locked = locked
            assignment.save(update_fields=["locked"])
        return assignment
