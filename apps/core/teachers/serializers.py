from rest_framework import serializers

from .models import Teacher


class TeacherSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Teacher
        fields = ['id', 'user_id', 'nip', 'nama', 'foto', 'created_at', 'updated_at']
        read_only_fields = fields


class TeacherCreateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    nip = serializers.CharField(max_length=30)
    nama = serializers.CharField(max_length=150)
    foto = serializers.CharField(max_length=500, required=False, allow_null=True, default=None)


class TeacherUpdateSerializer(serializers.Serializer):
    nama = serializers.CharField(max_length=150, required=False)
    foto = serializers.CharField(max_length=500, required=False, allow_null=True)
