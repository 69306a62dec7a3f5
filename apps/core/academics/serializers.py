from rest_framework import serializers

from .models import SchoolClass


class SchoolClassSerializer(serializers.ModelSerializer):
    wali_kelas_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = SchoolClass
        fields = ['id', 'nama_kelas', 'wali_kelas_id', 'created_at', 'updated_at']
        read_only_fields = fields


class SchoolClassCreateSerializer(serializers.Serializer):
    nama_kelas = serializers.CharField(max_length=50)
    wali_kelas_id = serializers.IntegerField()


class SchoolClassUpdateSerializer(serializers.Serializer):
    nama_kelas = serializers.CharField(max_length=50, required=False)
    wali_kelas_id = serializers.IntegerField(required=False)


class SchoolClassFilterSerializer(serializers.Serializer):
    wali_kelas_id = serializers.IntegerField(required=False)
