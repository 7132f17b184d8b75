from typing import Any, List, Optional, Tuple
import re
import unicodedata

from django.conf import settings
from django.http import HttpRequest

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{1,2})$")

# =========================
# Helpers
# =========================

def _get_ym_from_request(request: HttpRequest) -> Tuple[Optional[int], Optional[int], Optional[str]]:
    """Extrai ano e mês do parâmetro `month=YYYY-MM` (ou `year` + `month`)."""
    qp = getattr(request, "query_params", None) or getattr(request, "GET", {}) or {}
    raw_month = qp.get("month") or qp.get("mes")
    raw_year = qp.get("year") or qp.get("ano")
    if not raw_month:
        return None, None, "Parâmetro 'month' é obrigatório (formato YYYY-MM)."

    match = _PERIOD_RE.match(str(raw_month).strip())
    if match:
        y, m = match.group(1), match.group(2)
    elif raw_year is not None:
        y, m = raw_year, raw_month
    else:
        return None, None, "Parâmetro 'month' inválido (formato YYYY-MM)."
    try:
        y = int(y)
        m = int(m)
    except (TypeError, ValueError):
        return None, None, "Parâmetros 'year' e 'month' devem ser números inteiros."
    if not (1 <= m <= 12):
        return None, None, "Parâmetro 'month' deve estar entre 1 e 12."
    return y, m, None

def _get_setting(name: str, default: Any = None) -> Any:
    """Obtém uma configuração do Django settings com um valor padrão."""
    return getattr(settings, name, default)

def _get_setting_list(name: str, default: List[str]) -> List[str]:
    """Lê uma configuração que pode vir como lista ou string separada por vírgulas."""
    value = _get_setting(name, default)
    if isinstance(value, str):
        value = value.split(",")
    return [str(v).strip() for v in value if str(v).strip()]

def normalize_text(value: Optional[str]) -> str:
    """Remove acentos, converte para minúsculas e apara espaços.

    Todas as comparações por nome (ministérios, bandas, palavras-chave) passam
    por aqui; renomear um ministério muda silenciosamente o passo em que ele entra.
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value))
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded.lower().strip()
