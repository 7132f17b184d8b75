from __future__ import annotations
import threading
from typing import Optional, Any
import json
import logging
import uuid

_local = threading.local()

SENSITIVE_KEYS = {"password", "passwd", "senha", "token", "authorization", "csrfmiddlewaretoken"}

def get_current_user() -> Optional[Any]:
    """Retorna o usuário atual armazenado no thread-local, ou None se não houver."""
    return getattr(_local, "user", None)

def _client_ip(request):
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        return xff.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")

def _redact_mapping(data):
    out = {}
    for k, v in (data or {}).items():
        if str(k).lower() in SENSITIVE_KEYS:
            out[k] = "***redacted***"
        else:
            out[k] = v if isinstance(v, (str, int, float, bool, type(None))) else str(v)
    return out


class CurrentUserMiddleware:
    """Armazena o request.user num thread-local para ser lido pela auditoria."""
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        user = getattr(request, "user", None)
        _local.user = user if user is not None and user.is_authenticated else None
        try:
            return self.get_response(request)
        finally:
            _local.user = None

class ErrorLoggingMiddleware:
    """Loga exceções não tratadas e respostas 5xx com o contexto da requisição."""
    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger("django.request")

    def __call__(self, request):
        req_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        request._request_id = req_id
        try:
            response = self.get_response(request)
        except Exception:
            self.logger.error(
                "Unhandled exception | ctx=%s",
                json.dumps(self._build_context(request), ensure_ascii=False),
                exc_info=True,
            )
            raise
        if getattr(response, "status_code", 200) >= 500:
            ctx = self._build_context(request)
            ctx["status_code"] = response.status_code
            self.logger.error("5xx response | ctx=%s", json.dumps(ctx, ensure_ascii=False))
        response["X-Request-ID"] = req_id
        return response

    def _build_context(self, request):
        user = getattr(request, "user", None)
        username = user.get_username() if user is not None and user.is_authenticated else "Anonymous"
        return {
            "id": getattr(request, "_request_id", None),
            "method": request.method,
            "path": request.get_full_path(),
            "ip": _client_ip(request),
            "user": username,
            "ua": request.META.get("HTTP_USER_AGENT", ""),
            "get": _redact_mapping(getattr(request, "GET", {})),
        }
