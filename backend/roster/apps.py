from __future__ import annotations

import logging
from typing import List

from django.apps import AppConfig
from django.core.checks import Error, Tags, register

from roster.utils import _get_setting, _get_setting_list

log = logging.getLogger(__name__)

# =========================
# System checks (validações de settings)
# =========================

def _validate_int_range(setting_name: str, default: int, low: int, high: int, error_id: str) -> List[Error]:
    value = _get_setting(setting_name, default)
    if not isinstance(value, int) or not (low <= value <= high):
        return [
            Error(
                f"{setting_name} deve ser um inteiro entre {low} e {high}. Valor atual: {value!r}",
                id=error_id,
            )
        ]
    return []

@register(Tags.compatibility)
def roster_settings_check(app_configs, **kwargs):
    """Garante que os settings da geração de escala estejam válidos."""
    errors: List[Error] = []

    if not str(_get_setting("ROSTER_BAND_MINISTRY_NAME", "Bandas") or "").strip():
        errors.append(Error("ROSTER_BAND_MINISTRY_NAME não pode ser vazio.", id="roster.E001"))
    if not _get_setting_list("ROSTER_DERIVED_MINISTRIES", ["Multimídia", "Áudio", "Iluminação"]):
        errors.append(Error("ROSTER_DERIVED_MINISTRIES deve listar ao menos um ministério.", id="roster.E002"))
    if not _get_setting_list("ROSTER_SPECIAL_EVENT_KEYWORDS", ["eleve"]):
        errors.append(Error("ROSTER_SPECIAL_EVENT_KEYWORDS deve ter ao menos uma palavra-chave.", id="roster.E003"))

    errors += _validate_int_range("SCHEDULE_GENERATION_DAY", 25, 1, 28, "roster.E004")
    errors += _validate_int_range("SCHEDULE_GENERATION_HOUR", 12, 0, 23, "roster.E005")
    return errors

# =========================
# AppConfig
# =========================

class RosterConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'roster'
    verbose_name = "Escala de Ministérios"

    def ready(self):
        """Conecta os signals de auditoria."""
        from .domain import signals  # noqa: F401
