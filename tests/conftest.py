from datetime import datetime, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from roster.models import (
    Availability,
    Band,
    BandMember,
    Celebration,
    Ministry,
    MinistryMembership,
    Profile,
    Role,
)


def utc(y, m, d, hh=13, mm=0):
    return datetime(y, m, d, hh, mm, tzinfo=dt_timezone.utc)


@pytest.fixture
def november(db):
    """Duas celebrações em novembro/2025, duas bandas e o ministério de Áudio."""
    bandas = Ministry.objects.create(name="Bandas")
    audio = Ministry.objects.create(name="Áudio")
    vocal = Role.objects.create(ministry=bandas, name="Vocal")
    baixo = Role.objects.create(ministry=bandas, name="Baixo")
    mesa = Role.objects.create(ministry=audio, name="Mesa de som")

    banda_a = Band.objects.create(name="Banda A")
    banda_b = Band.objects.create(name="Banda B")
    a_vocal = Profile.objects.create(name="Ana")
    a_baixo = Profile.objects.create(name="Bruno")
    b_vocal = Profile.objects.create(name="Carla")
    b_baixo = Profile.objects.create(name="Daniel")
    BandMember.objects.create(band=banda_a, member=a_vocal, role_in_band="Vocal")
    BandMember.objects.create(band=banda_a, member=a_baixo, role_in_band="Baixo")
    BandMember.objects.create(band=banda_b, member=b_vocal, role_in_band="Vocal")
    BandMember.objects.create(band=banda_b, member=b_baixo, role_in_band="Baixo")

    t1 = Profile.objects.create(name="Igor")
    t2 = Profile.objects.create(name="Júlia")
    MinistryMembership.objects.create(member=t1, ministry=audio)
    MinistryMembership.objects.create(member=t2, ministry=audio)

    c1 = Celebration.objects.create(starts_at=utc(2025, 11, 2), location="Templo")
    c2 = Celebration.objects.create(starts_at=utc(2025, 11, 9), location="Templo")
    for c in (c1, c2):
        for p in (a_vocal, a_baixo, b_vocal, b_baixo, t1, t2):
            Availability.objects.create(member=p, celebration=c, available=True)

    return SimpleNamespace(
        bandas=bandas, audio=audio, vocal=vocal, baixo=baixo, mesa=mesa,
        banda_a=banda_a, banda_b=banda_b,
        a_vocal=a_vocal, a_baixo=a_baixo, b_vocal=b_vocal, b_baixo=b_baixo,
        t1=t1, t2=t2, c1=c1, c2=c2,
    )
