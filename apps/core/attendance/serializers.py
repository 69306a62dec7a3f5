from django.conf import settings
from rest_framework import serializers

from .models import Attendance


class AttendanceSerializer(serializers.ModelSerializer):
    siswa_id = serializers.IntegerField(read_only=True)
    guru_id = serializers.IntegerField(read_only=True, allow_null=True)
    kelas_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Attendance
        fields = [
            'id',
            'siswa_id',
            'guru_id',
            'kelas_id',
            'status',
            'tanggal',
            'waktu_masuk',
            'waktu_pulang',
            'keterangan',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AttendanceCreateSerializer(serializers.Serializer):
    siswa_id = serializers.IntegerField()
    guru_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    kelas_id = serializers.IntegerField()
    status = serializers.ChoiceField(choices=Attendance.STATUS_CHOICES)
    tanggal = serializers.DateField()
    waktu_masuk = serializers.TimeField(required=False, allow_null=True, default=None)
    waktu_pulang = serializers.TimeField(required=False, allow_null=True, default=None)
    keterangan = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class AttendanceUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Attendance.STATUS_CHOICES, required=False)
    waktu_masuk = serializers.TimeField(required=False, allow_null=True)
    waktu_pulang = serializers.TimeField(required=False, allow_null=True)
    keterangan = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class SiswaActionSerializer(serializers.Serializer):
    siswa_id = serializers.IntegerField()


class AttendanceFilterSerializer(serializers.Serializer):
    siswa_id = serializers.IntegerField(required=False)
    kelas_id = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({'end_date': 'End date must be on or after start date.'})
        return attrs


class AttendanceHistorySerializer(AttendanceFilterSerializer):
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=1000,
        default=lambda: settings.ABSENSI_HISTORY_DEFAULT_LIMIT,
    )
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
