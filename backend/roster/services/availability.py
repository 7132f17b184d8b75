from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterable, Optional

from roster.domain.models import Availability


@dataclass
class AvailabilityIndex:
    """Índice (celebração, membro) -> disponível? construído uma vez por geração.

    Ausência de registro (None) é diferente de `False`: ambos impedem a escala,
    mas os avisos distinguem "declarou indisponibilidade" de "não confirmou".
    """
    by_celebration: Dict[int, Dict[int, bool]] = field(default_factory=lambda: defaultdict(dict))

    @classmethod
    def build(
        cls,
        availabilities: Iterable[Availability],
        celebration_ids: Optional[Collection[int]] = None,
    ) -> AvailabilityIndex:
        """Indexa as disponibilidades, opcionalmente só das celebrações informadas."""
        index = cls()
        wanted = set(celebration_ids) if celebration_ids is not None else None
        for a in availabilities:
            if wanted is not None and a.celebration_id not in wanted:
                continue
            index.by_celebration[a.celebration_id][a.member_id] = bool(a.available)
        return index

    def status(self, celebration_id: int, member_id: int) -> Optional[bool]:
        return self.by_celebration.get(celebration_id, {}).get(member_id)

    def is_available(self, celebration_id: int, member_id: int) -> bool:
        return self.status(celebration_id, member_id) is True

    def for_celebration(self, celebration_id: int) -> Dict[int, bool]:
        """Cópia de membro -> disponível? para uma celebração (vazia se não houver registros)."""
        return dict(self.by_celebration.get(celebration_id, {}))
