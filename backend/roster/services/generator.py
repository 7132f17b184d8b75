from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from django.contrib.auth.models import User
from django.db import DatabaseError, transaction

from roster.domain.errors import DuplicateScheduleError, IncompleteAvailabilityError, ScheduleLoadError
from roster.domain.models import Assignment, ScheduleRun
from roster.domain.repositories import (
    AssignmentRepository,
    CelebrationRepository,
    ReferenceRepository,
    ScheduleRunRepository,
)
from roster.services.engine import (
    EngineResult,
    GenerationInputs,
    PlannedAssignment,
    compute_assignments,
    ministries_in_scope,
)
from roster.services.warnings import GenerationWarning

log = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = (
    "Existem celebrações sem disponibilidade registrada. Solicite aos membros que "
    "atualizem ou utilize a geração forçada."
)

UserRef = Union[User, int, None]

# ===== Data Classes =====

@dataclass
class GenerationResult:
    """Resultado de uma geração persistida."""
    schedule_run: ScheduleRun
    assignments: List[PlannedAssignment]
    warnings: List[GenerationWarning]

    @property
    def schedule_run_id(self) -> int:
        return self.schedule_run.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheduleRunId": self.schedule_run_id,
            "assignments": [a.to_dict() for a in self.assignments],
            "warnings": [w.to_dict() for w in self.warnings],
        }

# ===== Helpers =====

def _validate_period(month: int, year: int) -> None:
    if not isinstance(month, int) or not (1 <= month <= 12):
        raise ValueError(f"Mês inválido: {month!r} (esperado 1..12).")
    if not isinstance(year, int) or year < 1:
        raise ValueError(f"Ano inválido: {year!r}.")

def _resolve_user(created_by: UserRef) -> User:
    if created_by is None:
        raise ValueError("created_by é obrigatório para gerar a escala.")
    if isinstance(created_by, User):
        return created_by
    try:
        return User.objects.get(pk=created_by)
    except User.DoesNotExist as exc:
        raise ValueError(f"Usuário {created_by!r} não encontrado.") from exc

def _load_inputs(year: int, month: int, existing: Optional[List[Assignment]] = None) -> GenerationInputs:
    """Carrega celebrações do mês e todos os cadastros de referência.

    Raises:
        ScheduleLoadError: Se qualquer leitura falhar.
    """
    try:
        celebrations = list(CelebrationRepository.month_range(year, month))
        return GenerationInputs(
            celebrations=celebrations,
            profiles=ReferenceRepository.profiles(),
            ministries=ReferenceRepository.ministries(),
            roles=ReferenceRepository.roles(),
            bands=ReferenceRepository.active_bands(),
            band_members=ReferenceRepository.band_members(),
            memberships=ReferenceRepository.memberships(),
            availabilities=ReferenceRepository.availabilities([c.id for c in celebrations]),
            existing_assignments=list(existing or []),
        )
    except DatabaseError as exc:
        log.exception("Falha ao carregar dados para a escala %04d-%02d", year, month)
        raise ScheduleLoadError(f"Erro ao carregar dados necessários: {exc}") from exc

def _check_incomplete(result: EngineResult, allow_incomplete: bool, month: int, year: int) -> None:
    if result.warnings and not allow_incomplete:
        log.info(
            "Escala %04d-%02d recusada: %d vaga(s) sem preenchimento.",
            year, month, len(result.warnings),
        )
        raise IncompleteAvailabilityError(INCOMPLETE_MESSAGE, result.warnings)

# ===== Operações principais =====

def generate_schedule(
    month: int,
    year: int,
    *,
    created_by: UserRef,
    ministry: Optional[str] = None,
    preserve_locked: bool = False,
    allow_incomplete: bool = False,
) -> GenerationResult:
    """Gera e persiste a escala de um mês.

    Args:
        month (int): Mês (1..12).
        year (int): Ano.
        created_by (User | int): Usuário responsável pela geração.
        ministry (Optional[str], optional): Nome exato do ministério a gerar. Defaults to None (todos).
        preserve_locked (bool, optional): Mantém as vagas travadas. Defaults to False.
        allow_incomplete (bool, optional): Persiste mesmo com avisos. Defaults to False.

    Raises:
        DuplicateScheduleError: Já existe escala para o período.
        ScheduleLoadError: Falha ao carregar os dados de referência.
        IncompleteAvailabilityError: Há avisos e a geração incompleta não foi autorizada.

    Returns:
        GenerationResult: A escala criada, as atribuições e os avisos.
    """
    _validate_period(month, year)
    user = _resolve_user(created_by)

    if ScheduleRunRepository.by_period(month, year) is not None:
        log.info("Escala %04d-%02d já existe; geração recusada.", year, month)
        raise DuplicateScheduleError(month, year)

    inputs = _load_inputs(year, month)
    result = compute_assignments(
        inputs, year, month, ministry=ministry, preserve_locked=preserve_locked
    )
    _check_incomplete(result, allow_incomplete, month, year)

    with transaction.atomic():
        run = ScheduleRunRepository.create(month, year, user)
        AssignmentRepository.bulk_insert(run, result.assignments)

    log.info(
        "Escala %04d-%02d criada (id=%s): %d atribuição(ões), %d aviso(s).",
        year, month, run.id, len(result.assignments), len(result.warnings),
    )
    return GenerationResult(schedule_run=run, assignments=result.assignments, warnings=result.warnings)


def regenerate_schedule(
    schedule_run: Union[ScheduleRun, int],
    *,
    created_by: UserRef,
    ministry: Optional[str] = None,
    preserve_locked: bool = False,
    allow_incomplete: bool = False,
) -> GenerationResult:
    """Refaz as atribuições de uma escala existente (toda ou um ministério).

    Só as vagas não travadas dos ministérios recalculados são substituídas;
    atribuições travadas nunca são removidas. Com `preserve_locked`, as vagas
    travadas também não são refeitas. A contagem de escalações parte de todas
    as atribuições existentes, inclusive as que serão substituídas.

    Returns:
        GenerationResult: A escala, as novas atribuições e os avisos.
    """
    _resolve_user(created_by)
    run = schedule_run
    if not isinstance(run, ScheduleRun):
        run = ScheduleRun.objects.get(pk=schedule_run)
    year, month = run.year, run.month

    try:
        existing = list(AssignmentRepository.for_run(run))
    except DatabaseError as exc:
        raise ScheduleLoadError(f"Erro ao carregar atribuições da escala: {exc}") from exc

    inputs = _load_inputs(year, month, existing)
    scope_ids = {m.id for m in ministries_in_scope(inputs.ministries, ministry)}

    result = compute_assignments(
        inputs, year, month, ministry=ministry, preserve_locked=preserve_locked
    )
    _check_incomplete(result, allow_incomplete, month, year)

    with transaction.atomic():
        deleted = AssignmentRepository.delete_for_run(run, ministry_ids=scope_ids)
        AssignmentRepository.bulk_insert(run, result.assignments)

    log.info(
        "Escala %04d-%02d regerada (id=%s, ministério=%s): %d removida(s), %d criada(s), %d aviso(s).",
        year, month, run.id, ministry or "todos", deleted, len(result.assignments), len(result.warnings),
    )
    return GenerationResult(schedule_run=run, assignments=result.assignments, warnings=result.warnings)


def publish_schedule(schedule_run: ScheduleRun) -> ScheduleRun:
    run = ScheduleRunRepository.publish(schedule_run)
    log.info("Escala %04d-%02d publicada (id=%s).", run.year, run.month, run.id)
    return run
