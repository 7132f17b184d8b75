from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from django.contrib.auth.models import User
from django.forms.models import model_to_dict

from core.middleware import get_current_user
from roster.domain.models import AuditLog

DEFAULT_EXCLUDE = {"id"}

def snapshot_instance(instance, *, exclude: Iterable[str] = DEFAULT_EXCLUDE) -> Dict[str, Any]:
    """Captura os campos editáveis de uma instância para o log de auditoria."""
    return model_to_dict(instance, exclude=list(exclude))

def audit(
    action: str,
    instance, *,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
    author: Optional[User] = None,
) -> AuditLog:
    """Registra uma ação de auditoria para uma instância de modelo.

    Args:
        action (str): A ação realizada (ex.: "create", "publish", "lock", "delete").
        instance (Django Model): A instância afetada.
        before (Optional[Dict[str, Any]], optional): Estado antes da ação. Defaults to None.
        after (Optional[Dict[str, Any]], optional): Estado depois da ação. Defaults to None.
        author (Optional[User], optional): Autor; se None, usa o usuário da requisição corrente.

    Returns:
        AuditLog: O registro criado.
    """
    user = author or get_current_user()
    return AuditLog.objects.create(
        action=action,
        table=instance._meta.db_table,
        record_id=str(getattr(instance, "pk", None) or "unknown"),
        before=before,
        after=after,
        author=user if user is not None and user.is_authenticated else None,
    )
