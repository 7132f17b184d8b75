from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from roster.services.warnings import GenerationWarning


class ScheduleError(Exception):
    """Erro base da geração de escalas."""
    code = "SCHEDULE_ERROR"


class DuplicateScheduleError(ScheduleError):
    """Já existe uma escala para o período; é preciso excluí-la antes de gerar outra."""
    code = "DUPLICATE_SCHEDULE"

    def __init__(self, month: int, year: int):
        self.month = month
        self.year = year
        super().__init__(
            f"Já existe uma escala para {month:02d}/{year}. "
            "Exclua a escala existente antes de gerar uma nova."
        )


class IncompleteAvailabilityError(ScheduleError):
    """Há lacunas na escala e a geração incompleta não foi autorizada."""
    code = "INCOMPLETE_AVAILABILITY"

    def __init__(self, message: str, warnings: Sequence[GenerationWarning]):
        super().__init__(message)
        self.warnings: List[GenerationWarning] = list(warnings)


class ScheduleLoadError(ScheduleError):
    """Falha ao carregar os dados de referência necessários."""
    code = "LOAD_ERROR"
