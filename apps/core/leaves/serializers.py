from rest_framework import serializers

from .models import LeaveRequest


class LeaveRequestSerializer(serializers.ModelSerializer):
    siswa_id = serializers.IntegerField(read_only=True)
    reviewer_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = LeaveRequest
        fields = [
            'id',
            'siswa_id',
            'tanggal',
            'alasan',
            'jenis',
            'status',
            'reviewer_id',
            'reviewed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class LeaveRequestCreateSerializer(serializers.Serializer):
    siswa_id = serializers.IntegerField()
    tanggal = serializers.DateField()
    alasan = serializers.CharField()
    jenis = serializers.ChoiceField(choices=LeaveRequest.JENIS_CHOICES)


class LeaveRequestReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=(LeaveRequest.STATUS_APPROVED, LeaveRequest.STATUS_REJECTED),
    )


class LeaveRequestFilterSerializer(serializers.Serializer):
    siswa_id = serializers.IntegerField(required=False)
    kelas_id = serializers.IntegerField(required=False)
