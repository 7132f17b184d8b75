import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from roster.domain.errors import (
    DuplicateScheduleError,
    IncompleteAvailabilityError,
    ScheduleLoadError,
)
from roster.domain.models import Assignment, ScheduleRun, ScheduleStatus
from roster.domain.repositories import AssignmentRepository, ScheduleRunRepository
from roster.services.generator import generate_schedule as run_generation
from roster.services.generator import publish_schedule, regenerate_schedule
from roster.utils import _get_ym_from_request

from .filters import AssignmentFilter
from .serializers import (
    AssignmentSerializer,
    GenerateRequestSerializer,
    LockRequestSerializer,
    ScheduleRunSerializer,
)

log = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "sim"}

# =========================
# Helpers
# =========================

def _error_response(exc: Exception) -> Response:
    """Converte as exceções da geração em respostas HTTP."""
    if isinstance(exc, (DuplicateScheduleError, IncompleteAvailabilityError)):
        warnings = [w.to_dict() for w in getattr(exc, "warnings", [])]
        return Response(
            {"error": str(exc), "code": exc.code, "warnings": warnings},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, ValueError):
        return Response({"error": str(exc), "code": "INVALID_REQUEST"}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, ScheduleLoadError):
        log.error("Falha ao carregar dados da escala: %s", exc)
        return Response({"error": str(exc), "code": exc.code}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    log.error("Erro inesperado na geração da escala", exc_info=exc)
    return Response(
        {"error": "Erro interno ao gerar a escala.", "code": "INTERNAL_ERROR"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

def _generation_options(request):
    body = GenerateRequestSerializer(data=request.data or {})
    body.is_valid(raise_exception=True)
    force = body.validated_data["force"] or str(request.query_params.get("force", "")).lower() in _TRUTHY
    return {
        "ministry": body.validated_data.get("ministry") or None,
        "preserve_locked": body.validated_data["preserveLocked"],
        "allow_incomplete": force,
    }

def _visible_runs(request):
    qs = ScheduleRun.objects.all()
    if not request.user.is_staff:
        qs = qs.filter(status=ScheduleStatus.PUBLISHED)
    return qs

def _paginate(request, items):
    """Aplica `limit`/`offset` opcionais; retorna (página, erro)."""
    total = len(items)
    try:
        limit = int(request.query_params.get("limit", total))
        offset = int(request.query_params.get("offset", 0))
        if limit < 0 or offset < 0:
            raise ValueError
    except (TypeError, ValueError):
        return None, "Parâmetros 'limit' e 'offset' devem ser inteiros >= 0."
    return items[offset:offset + limit], None

# =========================
# Escalas
# =========================

@api_view(["POST"])
@permission_classes([IsAdminUser])
def generate_schedule(request):
    year, month, err = _get_ym_from_request(request)
    if err:
        return Response({"error": err, "code": "INVALID_MONTH"}, status=status.HTTP_400_BAD_REQUEST)
    options = _generation_options(request)
    try:
        result = run_generation(month, year, created_by=request.user, **options)
    except Exception as exc:
        return _error_response(exc)
    return Response(result.to_dict(), status=status.HTTP_201_CREATED)

@api_view(["POST"])
@permission_classes([IsAdminUser])
def regenerate(request, pk: int):
    run = get_object_or_404(ScheduleRun, pk=pk)
    options = _generation_options(request)
    try:
        result = regenerate_schedule(run, created_by=request.user, **options)
    except Exception as exc:
        return _error_response(exc)
    return Response(result.to_dict(), status=status.HTTP_200_OK)

@api_view(["GET", "DELETE"])
@permission_classes([IsAuthenticated])
def schedule_by_period(request):
    year, month, err = _get_ym_from_request(request)
    if err:
        return Response({"error": err, "code": "INVALID_MONTH"}, status=status.HTTP_400_BAD_REQUEST)

    if request.method == "DELETE":
        if not request.user.is_staff:
            return Response({"detail": "Apenas coordenadores podem excluir escalas."}, status=status.HTTP_403_FORBIDDEN)
        run = ScheduleRunRepository.by_period(month, year)
        if run is None:
            return Response({"detail": "Escala não encontrada."}, status=status.HTTP_404_NOT_FOUND)
        run.delete()
        log.info("Escala %04d-%02d excluída por %s.", year, month, request.user.get_username())
        return Response(status=status.HTTP_204_NO_CONTENT)

    run = _visible_runs(request).filter(month=month, year=year).first()
    if run is None:
        return Response({"detail": "Escala não encontrada."}, status=status.HTTP_404_NOT_FOUND)
    return Response(ScheduleRunSerializer(run).data)

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def schedule_detail(request, pk: int):
    run = get_object_or_404(_visible_runs(request), pk=pk)
    data = ScheduleRunSerializer(run).data
    data["assignments"] = AssignmentSerializer(AssignmentRepository.for_run(run), many=True).data
    return Response(data)

@api_view(["POST"])
@permission_classes([IsAdminUser])
def publish(request, pk: int):
    run = get_object_or_404(ScheduleRun, pk=pk)
    run = publish_schedule(run)
    return Response(ScheduleRunSerializer(run).data)

# =========================
# Atribuições
# =========================

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def assignment_list(request):
    qs = Assignment.objects.select_related("celebration", "ministry", "role", "member")
    if not request.user.is_staff:
        qs = qs.filter(schedule_run__status=ScheduleStatus.PUBLISHED)
    flt = AssignmentFilter(request.query_params, queryset=qs.order_by("celebration__starts_at", "id"))
    if not flt.is_valid():
        return Response(flt.errors, status=status.HTTP_400_BAD_REQUEST)
    items = list(flt.qs)
    page, err = _paginate(request, items)
    if err:
        return Response({"detail": err}, status=status.HTTP_400_BAD_REQUEST)
    return Response({
        "count": len(items),
        "results": AssignmentSerializer(page, many=True).data,
    })

@api_view(["POST"])
@permission_classes([IsAdminUser])
def lock_assignment(request, pk: int):
    assignment = get_object_or_404(Assignment, pk=pk)
    body = LockRequestSerializer(data=request.data)
    body.is_valid(raise_exception=True)
    AssignmentRepository.set_locked(assignment, body.validated_data["locked"])
    return Response(AssignmentSerializer(assignment).data)
