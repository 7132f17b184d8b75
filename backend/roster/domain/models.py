from __future__ import annotations

from django.contrib.auth.models import User
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

# =========================
# Choices canônicos
# =========================

class ScheduleStatus(models.TextChoices):
    DRAFT = "draft", "Rascunho"
    PUBLISHED = "published", "Publicada"

# =========================
# Cadastros de referência
# =========================

class Profile(models.Model):
    """Representa um voluntário."""
    name = models.CharField(max_length=120, db_index=True)
    family_group = models.CharField(
        max_length=64, blank=True, null=True, db_index=True,
        help_text="Identificador do grupo familiar (usado para escalar famílias juntas).",
    )
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    user = models.OneToOneField(
        User, blank=True, null=True, on_delete=models.SET_NULL, related_name="profile"
    )

    class Meta:
        verbose_name = "Voluntário"
        verbose_name_plural = "Voluntários"
        ordering = ["name"]

    def __str__(self):
        return self.name

class Ministry(models.Model):
    """Representa um ministério (equipe de serviço)."""
    name = models.CharField(max_length=80, unique=True)
    active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = "Ministério"
        verbose_name_plural = "Ministérios"
        ordering = ["name"]

    def __str__(self):
        return self.name

class Role(models.Model):
    """Função exercida por um voluntário dentro de um ministério."""
    ministry = models.ForeignKey(Ministry, on_delete=models.CASCADE, related_name="roles")
    name = models.CharField(max_length=80)

    class Meta:
        verbose_name = "Função"
        verbose_name_plural = "Funções"
        ordering = ["ministry__name", "name"]
        constraints = [
            models.UniqueConstraint(fields=("ministry", "name"), name="uniq_role_ministry_name"),
        ]

    def __str__(self):
        return f"{self.ministry} / {self.name}"

class Band(models.Model):
    """Banda de louvor que entra no rodízio das celebrações."""
    name = models.CharField(max_length=80, unique=True)
    active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = "Banda"
        verbose_name_plural = "Bandas"
        ordering = ["name"]

    def __str__(self):
        return self.name

class BandMember(models.Model):
    """Vínculo de um voluntário a uma banda, com a função que exerce nela."""
    band = models.ForeignKey(Band, on_delete=models.CASCADE, related_name="members")
    member = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="band_memberships")
    role_in_band = models.CharField(max_length=80)

    class Meta:
        verbose_name = "Integrante de banda"
        verbose_name_plural = "Integrantes de banda"
        ordering = ["band", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=("band", "member", "role_in_band"), name="uniq_band_member_role"
            ),
        ]

    def __str__(self):
        return f"{self.band}: {self.member} ({self.role_in_band})"

class MinistryMembership(models.Model):
    """Vínculo de um voluntário a um ministério."""
    member = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="ministry_memberships")
    ministry = models.ForeignKey(Ministry, on_delete=models.CASCADE, related_name="memberships")

    class Meta:
        verbose_name = "Membro de ministério"
        verbose_name_plural = "Membros de ministério"
        constraints = [
            models.UniqueConstraint(fields=("member", "ministry"), name="uniq_member_ministry"),
        ]

    def __str__(self):
        return f"{self.member} @ {self.ministry}"

# =========================
# Celebrações e disponibilidade
# =========================

class Celebration(models.Model):
    """Uma celebração agendada (culto, evento especial)."""
    starts_at = models.DateTimeField(db_index=True)
    location = models.CharField(max_length=120)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name = "Celebração"
        verbose_name_plural = "Celebrações"
        ordering = ["starts_at"]

    def __str__(self):
        return f"{self.starts_at:%Y-%m-%d %H:%M} {self.location}"

class Availability(models.Model):
    """Disponibilidade declarada de um voluntário para uma celebração."""
    member = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="availabilities")
    celebration = models.ForeignKey(Celebration, on_delete=models.CASCADE, related_name="availabilities")
    available = models.BooleanField(default=True)

    class Meta:
        verbose_name = "Disponibilidade"
        verbose_name_plural = "Disponibilidades"
        constraints = [
            models.UniqueConstraint(
                fields=("member", "celebration"), name="uniq_availability_member_celebration"
            ),
        ]

    def __str__(self):
        return f"{self.member} {self.celebration_id} {'sim' if self.available else 'não'}"

# =========================
# Escala gerada
# =========================

class ScheduleRun(models.Model):
    """Representa a escala gerada para um mês/ano."""
    month = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    year = models.PositiveIntegerField()
    status = models.CharField(
        max_length=12, choices=ScheduleStatus.choices, default=ScheduleStatus.DRAFT, db_index=True
    )
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    published_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        verbose_name = "Escala"
        verbose_name_plural = "Escalas"
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=("month", "year"), name="uniq_schedule_run_period"),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d} ({self.status})"

class Assignment(models.Model):
    """Um voluntário escalado em uma função de uma celebração."""
    schedule_run = models.ForeignKey(ScheduleRun, on_delete=models.CASCADE, related_name="assignments")
    celebration = models.ForeignKey(Celebration, on_delete=models.CASCADE, related_name="assignments")
    ministry = models.ForeignKey(Ministry, on_delete=models.CASCADE, related_name="assignments")
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="assignments")
    member = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="assignments")
    locked = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Atribuição"
        verbose_name_plural = "Atribuições"
        ordering = ["celebration__starts_at", "ministry__name", "role__name"]
        indexes = [
            models.Index(fields=["schedule_run", "locked"], name="assignment_run_locked_idx"),
            models.Index(fields=["schedule_run", "ministry"], name="assignment_run_ministry_idx"),
        ]

    def __str__(self):
        return f"{self.celebration} {self.role} -> {self.member}"

class AuditLog(models.Model):
    """Registra ações de criação, atualização e exclusão em outros modelos."""
    action = models.CharField(max_length=50, db_index=True)
    table = models.CharField(max_length=50, db_index=True)
    record_id = models.CharField(max_length=50)
    before = models.JSONField(blank=True, null=True, encoder=DjangoJSONEncoder)
    after = models.JSONField(blank=True, null=True, encoder=DjangoJSONEncoder)
    author = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Auditoria"
        verbose_name_plural = "Auditorias"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.created_at:%Y-%m-%d %H:%M:%S} | {self.table}:{self.record_id} | {self.action}"
