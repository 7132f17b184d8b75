from __future__ import annotations

from django.contrib import admin

from roster.domain.models import (
    Assignment,
    AuditLog,
    Availability,
    Band,
    BandMember,
    Celebration,
    Ministry,
    MinistryMembership,
    Profile,
    Role,
    ScheduleRun,
    ScheduleStatus,
)
from roster.services.generator import publish_schedule

# =========================
# Filtros utilitários
# =========================

class CelebrationMonthFilter(admin.SimpleListFilter):
    title = "Mês/Ano"
    parameter_name = "ym"

    def lookups(self, request, model_admin):
        dates = Celebration.objects.dates("starts_at", "month")
        return [(f"{d.year}-{d.month}", f"{d.month:02d}/{d.year}") for d in dates]

    def queryset(self, request, qs):
        val = self.value()
        if not val:
            return qs
        y, m = val.split("-")
        prefix = "celebration__" if qs.model is not Celebration else ""
        return qs.filter(**{f"{prefix}starts_at__year": int(y), f"{prefix}starts_at__month": int(m)})

# =========================
# Inlines
# =========================

class MinistryMembershipInline(admin.TabularInline):
    model = MinistryMembership
    extra = 0
    autocomplete_fields = ("ministry",)
    classes = ("collapse",)

class BandMemberInline(admin.TabularInline):
    model = BandMember
    extra = 0
    fields = ("member", "role_in_band")
    autocomplete_fields = ("member",)

class RoleInline(admin.TabularInline):
    model = Role
    extra = 0

class AssignmentInline(admin.TabularInline):
    model = Assignment
    extra = 0
    fields = ("celebration", "ministry", "role", "member", "locked")
    autocomplete_fields = ("member",)
    classes = ("collapse",)

# =========================
# Cadastros
# =========================

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "family_group", "email", "phone", "user")
    list_filter = ("family_group",)
    search_fields = ("name", "family_group", "email", "phone")
    ordering = ("name",)
    list_per_page = 50
    inlines = (MinistryMembershipInline,)

@admin.register(Ministry)
class MinistryAdmin(admin.ModelAdmin):
    list_display = ("name", "active")
    list_filter = ("active",)
    search_fields = ("name",)
    inlines = (RoleInline,)

@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "ministry")
    list_filter = ("ministry",)
    search_fields = ("name", "ministry__name")

@admin.register(Band)
class BandAdmin(admin.ModelAdmin):
    list_display = ("name", "active", "member_count")
    list_filter = ("active",)
    search_fields = ("name",)
    inlines = (BandMemberInline,)

    @admin.display(description="Integrantes")
    def member_count(self, obj: Band) -> int:
        return obj.members.count()

@admin.register(Celebration)
class CelebrationAdmin(admin.ModelAdmin):
    list_display = ("starts_at", "location", "notes")
    list_filter = (CelebrationMonthFilter,)
    search_fields = ("location", "notes")
    date_hierarchy = "starts_at"
    ordering = ("-starts_at",)
    list_per_page = 50

@admin.register(Availability)
class AvailabilityAdmin(admin.ModelAdmin):
    list_display = ("member", "celebration", "available")
    list_filter = ("available", CelebrationMonthFilter)
    search_fields = ("member__name",)
    autocomplete_fields = ("member",)
    list_select_related = ("member", "celebration")
    list_per_page = 50

# =========================
# Escala
# =========================

@admin.register(ScheduleRun)
class ScheduleRunAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "status", "created_by", "created_at", "published_at")
    list_filter = ("status", "year")
    readonly_fields = ("created_at", "published_at")
    ordering = ("-year", "-month")
    inlines = (AssignmentInline,)
    actions = ["publish_selected"]

    @admin.action(description="Publicar escalas selecionadas")
    def publish_selected(self, request, qs):
        for run in qs.exclude(status=ScheduleStatus.PUBLISHED):
            publish_schedule(run)

@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ("celebration", "ministry", "role", "member", "locked", "schedule_run")
    list_filter = ("locked", "ministry", CelebrationMonthFilter)
    search_fields = ("member__name", "role__name", "ministry__name")
    list_select_related = ("celebration", "ministry", "role", "member", "schedule_run")
    autocomplete_fields = ("member",)
    list_per_page = 50

    actions = ["lock_selected", "unlock_selected"]

    # Um save por linha para que a auditoria registre cada trava.
    @admin.action(description="Travar atribuições selecionadas")
    def lock_selected(self, request, qs):
        for a in qs.filter(locked=False):
            a.locked = True
            a.save(update_fields=["locked"])

    @admin.action(description="Destravar atribuições selecionadas")
    def unlock_selected(self, request, qs):
        for a in qs.filter(locked=True):
            a.locked = False
            a.save(update_fields=["locked"])

@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "table", "record_id", "created_at", "author")
    list_filter = ("table", "action")
    search_fields = ("table", "record_id", "author__username")
    readonly_fields = ("action", "table", "record_id", "before", "after", "author", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    list_per_page = 50
