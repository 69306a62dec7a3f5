from rest_framework import serializers

from .models import Student


class StudentSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    kelas_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'user_id', 'nisn', 'nama', 'kelas_id', 'foto', 'created_at', 'updated_at']
        read_only_fields = fields


class StudentCreateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    nisn = serializers.CharField(max_length=30)
    nama = serializers.CharField(max_length=150)
    kelas_id = serializers.IntegerField()
    foto = serializers.CharField(max_length=500, required=False, allow_null=True, default=None)


class StudentUpdateSerializer(serializers.Serializer):
    nama = serializers.CharField(max_length=150, required=False)
    kelas_id = serializers.IntegerField(required=False)
    foto = serializers.CharField(max_length=500, required=False, allow_null=True)


class StudentFilterSerializer(serializers.Serializer):
    kelas_id = serializers.IntegerField(required=False)
