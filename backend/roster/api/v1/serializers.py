from rest_framework import serializers
from roster.domain.models import Assignment, Profile, ScheduleRun

class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ["id","name","family_group"]
        read_only_fields = ("id","name","family_group")

class AssignmentSerializer(serializers.ModelSerializer):
    member = ProfileSerializer(read_only=True)
    ministry_id = serializers.IntegerField(read_only=True)
    ministry = serializers.CharField(source="ministry.name", read_only=True)
    role_id = serializers.IntegerField(read_only=True)
    role = serializers.CharField(source="role.name", read_only=True)
    celebration_starts_at = serializers.DateTimeField(source="celebration.starts_at", read_only=True)

    class Meta:
        model = Assignment
        fields = ["id","schedule_run","celebration","celebration_starts_at","ministry_id","ministry","role_id","role","member","locked"]
        read_only_fields = fields

class ScheduleRunSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = ScheduleRun
        fields = ["id","month","year","status","status_display","created_by","created_at","published_at"]
        read_only_fields = fields

class GenerateRequestSerializer(serializers.Serializer):
    ministry = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    preserveLocked = serializers.BooleanField(required=False, default=False)
    force = serializers.BooleanField(required=False, default=False)

class LockRequestSerializer(serializers.Serializer):
    locked = serializers.BooleanField()
