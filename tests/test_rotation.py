from datetime import datetime, timezone

from roster.models import Band, Celebration
from roster.services.rotation import is_special_celebration, plan_bands, split_bands

def _cel(id, day, notes=None, location="Templo"):
    return Celebration(id=id, starts_at=datetime(2025, 11, day, 13, tzinfo=timezone.utc), location=location, notes=notes)

def test_split_bands_separates_special_and_sorts_rotation():
    bands = [Band(id=1, name="Banda C"), Band(id=2, name="Élève Jovens"), Band(id=3, name="Banda A"), Band(id=4, name="banda B")]
    special, rotation = split_bands(bands)
    assert special.id == 2
    assert [b.name for b in rotation] == ["Banda A", "banda B", "Banda C"]

def test_split_bands_ignores_inactive():
    special, rotation = split_bands([Band(id=1, name="Banda A", active=False), Band(id=2, name="Banda B")])
    assert special is None
    assert [b.id for b in rotation] == [2]

def test_rotation_follows_week_index():
    bands = [Band(id=2, name="Banda B"), Band(id=1, name="Banda A")]
    cels = [_cel(10, 2), _cel(11, 9), _cel(12, 16), _cel(13, 23)]
    plan = plan_bands(cels, bands, 2025, 11)
    assert [plan.band_for(c.id).name for c in cels] == ["Banda A", "Banda B", "Banda A", "Banda B"]

def test_rotation_is_independent_of_input_order():
    bands = [Band(id=1, name="Banda A"), Band(id=2, name="Banda B"), Band(id=3, name="Banda C")]
    cels = [_cel(10, 2), _cel(11, 9), _cel(12, 16)]
    forward = plan_bands(cels, bands, 2025, 11)
    backward = plan_bands(list(reversed(cels)), list(reversed(bands)), 2025, 11)
    assert forward.by_celebration == backward.by_celebration
    assert forward.band_for(12).name == "Banda C"

def test_two_celebrations_same_week_share_band():
    bands = [Band(id=1, name="Banda A"), Band(id=2, name="Banda B")]
    plan = plan_bands([_cel(10, 9), _cel(11, 12)], bands, 2025, 11)
    assert plan.band_for(10) == plan.band_for(11)

def test_special_event_gets_special_band():
    bands = [Band(id=1, name="Banda A"), Band(id=2, name="Banda B"), Band(id=3, name="Eleve")]
    cels = [_cel(10, 2), _cel(11, 9, notes="Culto 30 Semanas")]
    plan = plan_bands(cels, bands, 2025, 11)
    assert plan.band_for(10).name == "Banda A"
    assert plan.band_for(11).name == "Eleve"

def test_special_event_without_special_band_uses_rotation():
    bands = [Band(id=1, name="Banda A"), Band(id=2, name="Banda B")]
    plan = plan_bands([_cel(11, 9, notes="Eleve")], bands, 2025, 11)
    assert plan.band_for(11).name == "Banda B"

def test_only_special_band_serves_everything():
    plan = plan_bands([_cel(10, 2), _cel(11, 9)], [Band(id=3, name="ELEVE")], 2025, 11)
    assert plan.band_for(10).id == 3
    assert plan.band_for(11).id == 3

def test_no_bands_means_no_band():
    plan = plan_bands([_cel(10, 2)], [], 2025, 11)
    assert plan.band_for(10) is None

def test_special_keyword_matches_location_and_ignores_accents():
    assert is_special_celebration(_cel(1, 2, location="Auditório Élève"))
    assert not is_special_celebration(_cel(1, 2, notes="Culto de domingo"))

def test_special_keywords_come_from_settings(settings):
    settings.ROSTER_SPECIAL_EVENT_KEYWORDS = "conferência"
    assert is_special_celebration(_cel(1, 2, notes="Conferencia anual"))
    assert not is_special_celebration(_cel(1, 2, notes="Eleve"))

def test_special_keyword_does_not_span_notes_and_location():
    assert not is_special_celebration(_cel(1, 2, notes="Culto 30", location="Semanas Hall"))
    assert is_special_celebration(_cel(1, 2, notes="Culto 30 semanas", location="Templo"))
