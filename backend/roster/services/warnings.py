from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from django.db import models


class WarningReason(models.TextChoices):
    UNAVAILABLE_DECLARED = "unavailable_declared", "Membro informou indisponibilidade para a celebração"
    UNAVAILABLE_UNCONFIRMED = "unavailable_unconfirmed", "Membro não confirmou disponibilidade para a celebração"
    ROLE_MISSING = "role_missing", "Função não cadastrada no ministério"
    NO_CANDIDATE = "no_candidate", "Nenhum membro disponível"
    BAND_MISSING = "band_missing", "Nenhuma banda configurada para a celebração"
    BAND_EMPTY = "band_empty", "Banda sem integrantes cadastrados"


@dataclass(frozen=True)
class GenerationWarning:
    """Uma vaga que não pôde ser preenchida (não é erro fatal)."""
    celebration_id: int
    celebration_starts_at: datetime
    ministry_id: Optional[int]
    ministry_name: Optional[str]
    role_id: Optional[int]
    role_name: Optional[str]
    reason: WarningReason

    @property
    def message(self) -> str:
        return WarningReason(self.reason).label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "celebrationId": self.celebration_id,
            "celebrationStartsAt": self.celebration_starts_at.isoformat(),
            "ministryId": self.ministry_id,
            "ministryName": self.ministry_name,
            "roleId": self.role_id,
            "roleName": self.role_name,
            "reason": self.message,
            "code": str(self.reason.value),
        }


@dataclass
class WarningCollector:
    items: List[GenerationWarning] = field(default_factory=list)

    def add(self, warning: GenerationWarning) -> None:
        self.items.append(warning)

    def __iter__(self) -> Iterator[GenerationWarning]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)
