from __future__ import annotations

import calendar as pycal
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

# ========= Utilidades de calendário (sempre em UTC) =========

def _check_month(month: int) -> None:
    if not (1 <= int(month) <= 12):
        raise ValueError(f"Mês inválido: {month!r} (esperado 1..12).")

def as_utc(dt: datetime) -> datetime:
    """Converte para UTC; datetimes sem fuso são tratados como UTC.

    Args:
        dt (datetime): Data/hora a converter.

    Returns:
        datetime: Data/hora ciente do fuso, em UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def month_bounds_utc(year: int, month: int) -> Tuple[datetime, datetime]:
    """Retorna o primeiro e o último instante do mês em UTC.

    Args:
        year (int): Ano.
        month (int): Mês (1..12).

    Returns:
        Tuple[datetime, datetime]: (início, fim) do mês, inclusivos.
    """
    _check_month(month)
    last_day = pycal.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime.combine(date(year, month, last_day), time.max, tzinfo=timezone.utc)
    return start, end

def first_sunday_utc(year: int, month: int) -> date:
    """Primeiro domingo (weekday=6) do mês."""
    _check_month(month)
    first = date(year, month, 1)
    return first + timedelta(days=(6 - first.weekday()) % 7)

def week_index(starts_at: datetime, year: int, month: int) -> int:
    """Índice da semana da celebração contado a partir do primeiro domingo do mês.

    Dias anteriores ao primeiro domingo contam como semana 0.
    """
    day = as_utc(starts_at).date()
    diff = (day - first_sunday_utc(year, month)).days
    return max(diff, 0) // 7

def next_year_month(year: int, month: int) -> Tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)
