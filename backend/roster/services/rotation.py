from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from roster.domain.models import Band, Celebration
from roster.services.calendar import week_index
from roster.utils import _get_setting, _get_setting_list, normalize_text

DEFAULT_SPECIAL_BAND_KEYWORD = "eleve"
DEFAULT_SPECIAL_EVENT_KEYWORDS = ["eleve", "30 semanas", "30-semanas", "30semana"]

# ==========================================================
# Configuração
# ==========================================================
def special_band_keyword() -> str:
    return normalize_text(_get_setting("ROSTER_SPECIAL_BAND_KEYWORD", DEFAULT_SPECIAL_BAND_KEYWORD))

def special_event_keywords() -> List[str]:
    return [
        normalize_text(k)
        for k in _get_setting_list("ROSTER_SPECIAL_EVENT_KEYWORDS", DEFAULT_SPECIAL_EVENT_KEYWORDS)
    ]

# ==========================================================
# Rodízio de bandas
# ==========================================================
@dataclass
class BandPlan:
    """Banda escolhida para cada celebração do mês (válido só durante a geração)."""
    special_band: Optional[Band] = None
    rotation: List[Band] = field(default_factory=list)
    by_celebration: Dict[int, Optional[Band]] = field(default_factory=dict)

    def band_for(self, celebration_id: int) -> Optional[Band]:
        return self.by_celebration.get(celebration_id)


def split_bands(bands: Iterable[Band]) -> Tuple[Optional[Band], List[Band]]:
    """Separa a banda especial das bandas do rodízio.

    Args:
        bands (Iterable[Band]): Bandas cadastradas (inativas são ignoradas).

    Returns:
        Tuple[Optional[Band], List[Band]]: (banda especial, bandas do rodízio ordenadas por nome).
    """
    keyword = special_band_keyword()
    special: Optional[Band] = None
    rotation: List[Band] = []
    for band in bands:
        if not band.active:
            continue
        if special is None and keyword and keyword in normalize_text(band.name):
            special = band
            continue
        rotation.append(band)
    rotation.sort(key=lambda b: (normalize_text(b.name), b.name))
    return special, rotation


def is_special_celebration(celebration: Celebration, keywords: Optional[Sequence[str]] = None) -> bool:
    """Verifica se notas ou local da celebração indicam um evento especial."""
    if keywords is None:
        keywords = special_event_keywords()
    notes = normalize_text(celebration.notes)
    location = normalize_text(celebration.location)
    return any(k and (k in notes or k in location) for k in keywords)


def plan_bands(celebrations: Iterable[Celebration], bands: Iterable[Band], year: int, month: int) -> BandPlan:
    """Define, de forma determinística, a banda de cada celebração do mês.

    Eventos especiais sempre recebem a banda especial (quando existe). As demais
    celebrações seguem o rodízio pela semana contada a partir do primeiro domingo.
    """
    special, rotation = split_bands(bands)
    keywords = special_event_keywords()
    plan = BandPlan(special_band=special, rotation=rotation)

    for celebration in celebrations:
        if special is not None and is_special_celebration(celebration, keywords):
            plan.by_celebration[celebration.id] = special
            continue
        if not rotation:
            plan.by_celebration[celebration.id] = special
            continue
        idx = week_index(celebration.starts_at, year, month)
        plan.by_celebration[celebration.id] = rotation[idx % len(rotation)]
    return plan
