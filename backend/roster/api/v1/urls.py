from django.urls import path
from .views import (
    assignment_list,
    generate_schedule,
    lock_assignment,
    publish,
    regenerate,
    schedule_by_period,
    schedule_detail,
)

urlpatterns = [
    path("schedules/generate", generate_schedule, name="api_generate"),
    path("schedules/by-period", schedule_by_period, name="api_by_period"),
    path("schedules/<int:pk>", schedule_detail, name="api_schedule_detail"),
    path("schedules/<int:pk>/regenerate", regenerate, name="api_regenerate"),
    path("schedules/<int:pk>/publish", publish, name="api_publish"),
    path("assignments", assignment_list, name="api_assignments"),
    path("assignments/<int:pk>/lock", lock_assignment, name="api_lock_assignment"),
]
