from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth.models import User
from django.utils import timezone

from roster.domain.errors import DuplicateScheduleError, IncompleteAvailabilityError, ScheduleLoadError
from roster.domain.repositories import MinistryRepository
from roster.services.calendar import next_year_month
from roster.services.generator import generate_schedule

class Command(BaseCommand):
    help = "Gera a escala de um mês (bandas e ministérios derivados) e grava como rascunho."

    def add_arguments(self, parser):
        parser.add_argument("--year", type=int, help="Target year (defaults: current or --next).")
        parser.add_argument("--month", type=int, help="Target month [1..12] (defaults: current or --next).")
        parser.add_argument(
            "--next",
            action="store_true",
            help="Use next month relative to local time (overrides year/month if omitted).",
        )
        parser.add_argument("--ministry", type=str, help="Gera somente o ministério informado (nome exato).")
        parser.add_argument(
            "--preserve-locked",
            action="store_true",
            help="Mantém as vagas travadas.",
        )
        parser.add_argument(
            "--allow-incomplete",
            action="store_true",
            help="Grava a escala mesmo com vagas sem preenchimento.",
        )
        parser.add_argument(
            "--user",
            type=str,
            required=True,
            help="Username registrado como autor da escala.",
        )

    def handle(self, *args, **opts):
        today = timezone.localdate()
        year = opts["year"]
        month = opts["month"]

        if opts["next"] and (year is None or month is None):
            year, month = next_year_month(today.year, today.month)
        elif year is None or month is None:
            year, month = today.year, today.month

        username = opts["user"]
        try:
            user = User.objects.get(username=username)
        except User.DoesNotExist:
            raise CommandError(f"User '{username}' not found.")

        ministry = opts.get("ministry")
        if ministry and MinistryRepository.by_name(ministry) is None:
            raise CommandError(f"Ministério '{ministry}' não encontrado.")

        try:
            result = generate_schedule(
                month,
                year,
                created_by=user,
                ministry=ministry,
                preserve_locked=opts["preserve_locked"],
                allow_incomplete=opts["allow_incomplete"],
            )
        except IncompleteAvailabilityError as exc:
            self._write_warnings(exc.warnings)
            raise CommandError(f"{exc} ({len(exc.warnings)} aviso(s)). Use --allow-incomplete para gravar.")
        except (DuplicateScheduleError, ScheduleLoadError, ValueError) as exc:
            raise CommandError(str(exc))

        self._write_warnings(result.warnings)
        self.stdout.write(
            self.style.SUCCESS(
                f"[generate] Escala {year}-{month:02d} criada (id={result.schedule_run_id}); "
                f"{len(result.assignments)} atribuição(ões), {len(result.warnings)} aviso(s)."
            )
        )

    def _write_warnings(self, warnings):
        for w in warnings:
            self.stdout.write(self.style.WARNING(
                f"  {w.celebration_starts_at:%Y-%m-%d %H:%M} {w.ministry_name or '-'} / "
                f"{w.role_name or '-'}: {w.message}"
            ))
