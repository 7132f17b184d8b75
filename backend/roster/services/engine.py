from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from roster.domain.models import (
    Assignment,
    Availability,
    Band,
    BandMember,
    Celebration,
    Ministry,
    MinistryMembership,
    Profile,
    Role,
)
from roster.services.availability import AvailabilityIndex
from roster.services.calendar import as_utc
from roster.services.rotation import BandPlan, plan_bands
from roster.services.warnings import GenerationWarning, WarningCollector, WarningReason
from roster.utils import _get_setting, _get_setting_list, normalize_text

DEFAULT_BAND_MINISTRY_NAME = "Bandas"
DEFAULT_DERIVED_MINISTRY_NAMES = ["Multimídia", "Áudio", "Iluminação"]

SlotKey = Tuple[int, int]

# ===== Configuração =====

def band_ministry_name() -> str:
    return _get_setting("ROSTER_BAND_MINISTRY_NAME", DEFAULT_BAND_MINISTRY_NAME)

def derived_ministry_names() -> List[str]:
    return _get_setting_list("ROSTER_DERIVED_MINISTRIES", DEFAULT_DERIVED_MINISTRY_NAMES)

def _find_ministry(ministries: Iterable[Ministry], name: str) -> Optional[Ministry]:
    target = normalize_text(name)
    for ministry in ministries:
        if ministry.active and normalize_text(ministry.name) == target:
            return ministry
    return None

def resolve_band_ministry(ministries: Sequence[Ministry]) -> Optional[Ministry]:
    return _find_ministry(ministries, band_ministry_name())

def resolve_derived_ministries(ministries: Sequence[Ministry]) -> List[Ministry]:
    """Ministérios derivados na ordem configurada; os ausentes são ignorados."""
    found: List[Ministry] = []
    for name in derived_ministry_names():
        ministry = _find_ministry(ministries, name)
        if ministry is not None and ministry not in found:
            found.append(ministry)
    return found

def _band_filter_name(band_ministry: Optional[Ministry]) -> str:
    return band_ministry.name if band_ministry is not None else band_ministry_name()

def runs_band_pass(band_ministry: Optional[Ministry], ministry_filter: Optional[str]) -> bool:
    return not ministry_filter or ministry_filter == _band_filter_name(band_ministry)

def runs_derived_pass(
    ministry: Ministry, band_ministry: Optional[Ministry], ministry_filter: Optional[str]
) -> bool:
    if not ministry_filter:
        return True
    return ministry_filter in (ministry.name, _band_filter_name(band_ministry))

def ministries_in_scope(ministries: Sequence[Ministry], ministry_filter: Optional[str]) -> List[Ministry]:
    """Ministérios cujas vagas são recalculadas para o filtro informado."""
    band_ministry = resolve_band_ministry(ministries)
    scope: List[Ministry] = []
    if band_ministry is not None and runs_band_pass(band_ministry, ministry_filter):
        scope.append(band_ministry)
    for ministry in resolve_derived_ministries(ministries):
        if runs_derived_pass(ministry, band_ministry, ministry_filter) and ministry not in scope:
            scope.append(ministry)
    return scope

# ===== Data Classes =====

@dataclass
class GenerationInputs:
    """Tudo o que a geração precisa, carregado antes do cálculo."""
    celebrations: List[Celebration]
    profiles: List[Profile]
    ministries: List[Ministry]
    roles: List[Role]
    bands: List[Band]
    band_members: List[BandMember]
    memberships: List[MinistryMembership]
    availabilities: List[Availability]
    existing_assignments: List[Assignment] = field(default_factory=list)


@dataclass(frozen=True)
class PlannedAssignment:
    celebration_id: int
    ministry_id: int
    role_id: int
    member_id: int
    locked: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "celebration_id": self.celebration_id,
            "ministry_id": self.ministry_id,
            "role_id": self.role_id,
            "member_id": self.member_id,
            "locked": self.locked,
        }


@dataclass
class GenerationContext:
    """Estado mutável de uma geração (contagens, travas, famílias da banda)."""
    counts: Dict[int, int] = field(default_factory=lambda: defaultdict(int))
    locked_keys: Set[SlotKey] = field(default_factory=set)
    band_families: Dict[int, Set[str]] = field(default_factory=lambda: defaultdict(set))
    planned: List[PlannedAssignment] = field(default_factory=list)
    warnings: WarningCollector = field(default_factory=WarningCollector)

    @classmethod
    def seeded_from(cls, assignments: Iterable[Assignment]) -> GenerationContext:
        """Inicializa contagens e travas a partir de atribuições já existentes."""
        ctx = cls()
        for a in assignments:
            ctx.counts[a.member_id] += 1
            if a.locked:
                ctx.locked_keys.add((a.celebration_id, a.role_id))
        return ctx

    def is_locked(self, celebration_id: int, role_id: int) -> bool:
        return (celebration_id, role_id) in self.locked_keys

    def count_for(self, member_id: int) -> int:
        return self.counts.get(member_id, 0)

    def register(self, planned: PlannedAssignment) -> None:
        self.planned.append(planned)
        self.counts[planned.member_id] += 1


@dataclass
class EngineResult:
    assignments: List[PlannedAssignment]
    warnings: List[GenerationWarning]
    counts: Dict[int, int]
    band_plan: BandPlan

# ===== Engine =====

class RoleAssignmentEngine:
    """Preenche as funções de banda e dos ministérios derivados, celebração a celebração."""

    def __init__(
        self,
        inputs: GenerationInputs,
        year: int,
        month: int,
        *,
        ministry: Optional[str] = None,
        preserve_locked: bool = False,
    ):
        self.inputs = inputs
        self.year = year
        self.month = month
        self.ministry_filter = ministry or None
        self.preserve_locked = preserve_locked

        self.band_ministry = resolve_band_ministry(inputs.ministries)
        self.derived_ministries = resolve_derived_ministries(inputs.ministries)
        self.profiles_by_id: Dict[int, Profile] = {p.id: p for p in inputs.profiles}
        self.role_by_key: Dict[Tuple[int, str], Role] = {}
        self.roles_by_ministry: Dict[int, List[Role]] = defaultdict(list)
        for role in sorted(inputs.roles, key=lambda r: r.id):
            self.role_by_key.setdefault((role.ministry_id, role.name), role)
            self.roles_by_ministry[role.ministry_id].append(role)
        self.members_by_band: Dict[int, List[BandMember]] = defaultdict(list)
        for bm in inputs.band_members:
            self.members_by_band[bm.band_id].append(bm)
        self.member_ids_by_ministry: Dict[int, Set[int]] = defaultdict(set)
        for mm in inputs.memberships:
            self.member_ids_by_ministry[mm.ministry_id].add(mm.member_id)
        self.celebrations = sorted(inputs.celebrations, key=lambda c: (as_utc(c.starts_at), c.id))
        self.availability = AvailabilityIndex.build(
            inputs.availabilities, celebration_ids=[c.id for c in self.celebrations]
        )

    def run(self) -> EngineResult:
        ctx = GenerationContext.seeded_from(self.inputs.existing_assignments)
        band_plan = plan_bands(self.celebrations, self.inputs.bands, self.year, self.month)

        for celebration in self.celebrations:
            if self.band_ministry is not None and runs_band_pass(self.band_ministry, self.ministry_filter):
                self._fill_band_roles(ctx, celebration, band_plan.band_for(celebration.id))
            for ministry in self.derived_ministries:
                if not runs_derived_pass(ministry, self.band_ministry, self.ministry_filter):
                    continue
                self._fill_derived_roles(ctx, celebration, ministry)

        return EngineResult(
            assignments=list(ctx.planned),
            warnings=list(ctx.warnings),
            counts=dict(ctx.counts),
            band_plan=band_plan,
        )

    # ----- band pass -----

    def _fill_band_roles(self, ctx: GenerationContext, celebration: Celebration, band: Optional[Band]) -> None:
        ministry = self.band_ministry
        if band is None:
            self._warn(ctx, celebration, ministry, None, None, WarningReason.BAND_MISSING)
            return
        band_members = self.members_by_band.get(band.id, [])
        if not band_members:
            self._warn(ctx, celebration, ministry, None, None, WarningReason.BAND_EMPTY)
            return

        for bm in band_members:
            profile = self.profiles_by_id.get(bm.member_id)
            if profile is None:
                continue
            status = self.availability.status(celebration.id, profile.id)
            if status is not True:
                reason = (
                    WarningReason.UNAVAILABLE_DECLARED if status is False
                    else WarningReason.UNAVAILABLE_UNCONFIRMED
                )
                role = self.role_by_key.get((ministry.id, bm.role_in_band))
                self._warn(ctx, celebration, ministry, role, bm.role_in_band, reason)
                continue
            role = self.role_by_key.get((ministry.id, bm.role_in_band))
            if role is None:
                self._warn(ctx, celebration, ministry, None, bm.role_in_band, WarningReason.ROLE_MISSING)
                continue
            if self.preserve_locked and ctx.is_locked(celebration.id, role.id):
                continue
            ctx.register(PlannedAssignment(
                celebration_id=celebration.id,
                ministry_id=ministry.id,
                role_id=role.id,
                member_id=profile.id,
            ))
            if profile.family_group:
                ctx.band_families[celebration.id].add(profile.family_group)

    # ----- derived pass -----

    def _fill_derived_roles(self, ctx: GenerationContext, celebration: Celebration, ministry: Ministry) -> None:
        for role in self.roles_by_ministry.get(ministry.id, []):
            if self.preserve_locked and ctx.is_locked(celebration.id, role.id):
                continue
            chosen = self._pick_candidate(ctx, celebration, ministry)
            if chosen is None:
                self._warn(ctx, celebration, ministry, role, role.name, WarningReason.NO_CANDIDATE)
                continue
            ctx.register(PlannedAssignment(
                celebration_id=celebration.id,
                ministry_id=ministry.id,
                role_id=role.id,
                member_id=chosen.id,
            ))

    def _pick_candidate(self, ctx: GenerationContext, celebration: Celebration, ministry: Ministry) -> Optional[Profile]:
        """Escolhe o candidato com menos escalas, preferindo famílias da banda do dia.

        Empates ficam com o primeiro da lista (ordenada por id do voluntário).
        """
        member_ids = self.member_ids_by_ministry.get(ministry.id, set())
        declared = self.availability.for_celebration(celebration.id)
        eligible = [
            self.profiles_by_id[mid]
            for mid in sorted(member_ids)
            if mid in self.profiles_by_id and declared.get(mid) is True
        ]
        families = ctx.band_families.get(celebration.id, set())
        family_pool = [p for p in eligible if p.family_group and p.family_group in families]
        pool = family_pool or eligible
        if not pool:
            return None
        return min(pool, key=lambda p: ctx.count_for(p.id))

    def _warn(
        self,
        ctx: GenerationContext,
        celebration: Celebration,
        ministry: Optional[Ministry],
        role: Optional[Role],
        role_name: Optional[str],
        reason: WarningReason,
    ) -> None:
        ctx.warnings.add(GenerationWarning(
            celebration_id=celebration.id,
            celebration_starts_at=celebration.starts_at,
            ministry_id=ministry.id if ministry is not None else None,
            ministry_name=ministry.name if ministry is not None else None,
            role_id=role.id if role is not None else None,
            role_name=role_name,
            reason=reason,
        ))


def compute_assignments(
    inputs: GenerationInputs,
    year: int,
    month: int,
    *,
    ministry: Optional[str] = None,
    preserve_locked: bool = False,
) -> EngineResult:
    return RoleAssignmentEngine(
        inputs, year, month, ministry=ministry, preserve_locked=preserve_locked
    ).run()
