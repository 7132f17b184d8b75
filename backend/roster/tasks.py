from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from celery import shared_task
from django.conf import settings
from django.contrib.auth.models import Group, User
from django.core.mail import send_mail
from django.db import DatabaseError
from django.utils import timezone

from roster.domain.errors import DuplicateScheduleError, ScheduleLoadError
from roster.services.calendar import next_year_month
from roster.services.generator import generate_schedule

log = logging.getLogger(__name__)

# =========================
# Helpers
# =========================

def _distinct_valid_emails(users: Iterable[User]) -> List[str]:
    emails = {u.email.strip().lower() for u in users if getattr(u, "email", None)}
    return [e for e in emails if e]

def _system_user() -> User:
    username = getattr(settings, "SCHEDULE_SYSTEM_USERNAME", "system")
    user, created = User.objects.get_or_create(username=username, defaults={"is_active": False})
    if created:
        log.info("Usuário de sistema '%s' criado para a geração automática.", username)
    return user

# =========================
# Tasks
# =========================

@shared_task
def monthly_draft_generation(year: Optional[int] = None, month: Optional[int] = None) -> str:
    """Gera o rascunho da escala do mês seguinte.

    Sem `year`/`month`, só roda no dia e hora configurados e mira o próximo mês.
    A escala é gravada mesmo com lacunas; os avisos ficam no log.

    Returns:
        str: Mensagem com o resultado da geração.
    """
    if year is None or month is None:
        now = timezone.localtime()
        if now.day != settings.SCHEDULE_GENERATION_DAY or now.hour != settings.SCHEDULE_GENERATION_HOUR:
            return "Not the scheduled time."
        year, month = next_year_month(now.year, now.month)

    log.info("Monthly draft generation: %04d-%02d", year, month)
    try:
        result = generate_schedule(month, year, created_by=_system_user(), allow_incomplete=True)
    except DuplicateScheduleError:
        log.info("Monthly draft: escala %04d-%02d já existe; nada a fazer.", year, month)
        return f"Schedule {year}-{month:02d} already exists"
    except ScheduleLoadError:
        log.exception("Monthly draft: falha ao carregar dados de %04d-%02d", year, month)
        raise

    log.info(
        "Monthly draft: run=%s, assignments=%d, warnings=%d",
        result.schedule_run_id,
        len(result.assignments),
        len(result.warnings),
    )
    notify_schedule_generated.delay(year, month, len(result.warnings))
    return f"Draft generated for {year}-{month:02d} ({len(result.assignments)} assignments)"

@shared_task
def notify_schedule_generated(year: int, month: int, warning_count: int = 0) -> int:
    """Notifica os coordenadores sobre a geração do rascunho da escala mensal.

    Args:
        year (int): Ano da escala gerada.
        month (int): Mês da escala gerada.
        warning_count (int, optional): Quantidade de vagas sem preenchimento. Defaults to 0.

    Returns:
        int: Número de destinatários notificados.
    """
    subject = f"Escala {year}-{month:02d} gerada (rascunho)"
    msg = f"Acesse o sistema e revise o rascunho do mês {month:02d}/{year}."
    if warning_count:
        msg += f" Há {warning_count} vaga(s) sem preenchimento."
    try:
        group = Group.objects.filter(name="Coordinator").first()
        users = group.user_set.all() if group else []
        recipients = _distinct_valid_emails(users)
    except DatabaseError:  # pragma: no cover
        log.exception("Erro ao coletar destinatários do grupo Coordinator")
        recipients = []
    if not recipients:
        log.info("notify_schedule_generated: nenhum destinatário encontrado.")
        return 0
    sent = send_mail(subject, msg, settings.DEFAULT_FROM_EMAIL, recipients, fail_silently=True)
    if not sent:
        log.warning("notify_schedule_generated: falha ao enviar para %d destinatário(s).", len(recipients))
        return 0
    log.info("notify_schedule_generated: enviado para %d destinatário(s).", len(recipients))
    return len(recipients)
