from __future__ import annotations

from django.core.management.base import BaseCommand
from django.contrib.auth.models import User

from roster.domain.models import Band, BandMember, Ministry, MinistryMembership, Profile, Role
from roster.utils import _get_setting, _get_setting_list

BAND_ROLES = ["Vocal", "Violão", "Teclado", "Baixo", "Bateria"]
DERIVED_ROLES = {
    "Multimídia": ["Projeção"],
    "Áudio": ["Mesa de som"],
    "Iluminação": ["Mesa de luz"],
}

# (banda, [(nome, família, função na banda)])
DEMO_BANDS = [
    ("Banda A", [("Ana", "silva", "Vocal"), ("Bruno", "souza", "Violão"), ("Carla", None, "Bateria")]),
    ("Banda B", [("Daniel", "lima", "Vocal"), ("Elisa", None, "Teclado"), ("Fábio", "costa", "Baixo")]),
    ("Eleve", [("Gabi", None, "Vocal"), ("Heitor", "rocha", "Violão")]),
]

# (nome, família, ministérios derivados)
DEMO_TECH = [
    ("Igor", "silva", ["Áudio"]),
    ("Júlia", "lima", ["Multimídia", "Iluminação"]),
    ("Kleber", None, ["Áudio", "Iluminação"]),
    ("Laura", "souza", ["Multimídia"]),
]

class Command(BaseCommand):
    help = "Seed demo data (admin + ministérios, funções, bandas e voluntários). Idempotente."

    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-user",
            type=str,
            default="admin",
            help="Username do superusuário demo (default: admin).",
        )
        parser.add_argument(
            "--admin-email",
            type=str,
            default="admin@example.com",
            help="Email do superusuário demo (default: admin@example.com).",
        )
        parser.add_argument(
            "--admin-pass",
            type=str,
            default="admin",
            help="Senha do superusuário demo (default: admin).",
        )

    def handle(self, *args, **kwargs):
        admin_user = kwargs["admin_user"]
        admin_email = kwargs["admin_email"]
        admin_pass = kwargs["admin_pass"]

        if not User.objects.filter(username=admin_user).exists():
            User.objects.create_superuser(admin_user, admin_email, admin_pass)
            self.stdout.write(self.style.SUCCESS(f"Created superuser {admin_user}:{admin_pass}"))
        else:
            self.stdout.write(self.style.WARNING(f"Superuser {admin_user} already exists."))

        system_username = _get_setting("SCHEDULE_SYSTEM_USERNAME", "system")
        User.objects.get_or_create(username=system_username, defaults={"is_active": False})

        band_ministry, _ = Ministry.objects.get_or_create(name=_get_setting("ROSTER_BAND_MINISTRY_NAME", "Bandas"))
        for role_name in BAND_ROLES:
            Role.objects.get_or_create(ministry=band_ministry, name=role_name)

        derived = {}
        for name in _get_setting_list("ROSTER_DERIVED_MINISTRIES", list(DERIVED_ROLES)):
            ministry, _ = Ministry.objects.get_or_create(name=name)
            for role_name in DERIVED_ROLES.get(name, ["Operador"]):
                Role.objects.get_or_create(ministry=ministry, name=role_name)
            derived[name] = ministry

        created_count = 0
        for band_name, members in DEMO_BANDS:
            band, _ = Band.objects.get_or_create(name=band_name)
            for person, family, role_in_band in members:
                profile, created = Profile.objects.get_or_create(name=person, defaults={"family_group": family})
                created_count += int(created)
                BandMember.objects.get_or_create(band=band, member=profile, role_in_band=role_in_band)
                MinistryMembership.objects.get_or_create(member=profile, ministry=band_ministry)

        for person, family, ministries in DEMO_TECH:
            profile, created = Profile.objects.get_or_create(name=person, defaults={"family_group": family})
            created_count += int(created)
            for name in ministries:
                if name in derived:
                    MinistryMembership.objects.get_or_create(member=profile, ministry=derived[name])

        self.stdout.write(self.style.SUCCESS(
            f"Seed completed. profiles: created={created_count}, total={Profile.objects.count()}; "
            f"ministries={Ministry.objects.count()}, bands={Band.objects.count()}."
        ))
