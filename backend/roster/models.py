from roster.domain.models import (  # noqa: F401
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
