import django_filters

from roster.domain.models import Assignment

class AssignmentFilter(django_filters.FilterSet):
    """Busca de atribuições por escala, ministério, voluntário ou celebração."""
    month = django_filters.NumberFilter(field_name="schedule_run__month")
    year = django_filters.NumberFilter(field_name="schedule_run__year")
    member_name = django_filters.CharFilter(field_name="member__name", lookup_expr="icontains")

    class Meta:
        model = Assignment
        fields = ["schedule_run", "ministry", "member", "celebration", "role", "locked"]
