from __future__ import annotations

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Assignment, ScheduleRun, ScheduleStatus
from roster.services.audit import audit, snapshot_instance

# ========= ScheduleRun: criação, publicação e exclusão =========

@receiver(pre_save, sender=ScheduleRun)
def _schedule_run_pre_save(sender, instance: ScheduleRun, **kwargs):
    instance._old_status = None
    instance._before_snapshot = None
    if not instance.pk:
        return
    old = ScheduleRun.objects.filter(pk=instance.pk).first()
    if old is not None:
        instance._old_status = old.status
        instance._before_snapshot = snapshot_instance(old)

@receiver(post_save, sender=ScheduleRun)
def _schedule_run_post_save(sender, instance: ScheduleRun, created: bool, **kwargs):
    if created:
        action = "create"
    elif instance.status == ScheduleStatus.PUBLISHED and getattr(instance, "_old_status", None) != ScheduleStatus.PUBLISHED:
        action = "publish"
    else:
        action = "update"
    audit(action, instance, before=getattr(instance, "_before_snapshot", None), after=snapshot_instance(instance))

@receiver(post_delete, sender=ScheduleRun)
def _schedule_run_post_delete(sender, instance: ScheduleRun, **kwargs):
    audit("delete", instance, before=snapshot_instance(instance), after=None)

# ========= Assignment: só mudanças de trava interessam =========

@receiver(pre_save, sender=Assignment)
def _assignment_pre_save(sender, instance: Assignment, **kwargs):
    instance._old_locked = None
    if instance.pk:
        instance._old_locked = (
            Assignment.objects.filter(pk=instance.pk).values_list("locked", flat=True).first()
        )

@receiver(post_save, sender=Assignment)
def _assignment_post_save(sender, instance: Assignment, created: bool, **kwargs):
    old_locked = getattr(instance, "_old_locked", None)
    if created or old_locked is None or old_locked == instance.locked:
        return
    audit(
        "lock" if instance.locked else "unlock",
        instance,
        before={"locked": old_locked},
        after={"locked": instance.locked},
    )
