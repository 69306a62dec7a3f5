import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
        ('students', '0001_initial'),
        ('teachers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Attendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('hadir', 'Hadir'), ('izin', 'Izin'), ('sakit', 'Sakit'), ('alpha', 'Alpha')], max_length=10)),
                ('tanggal', models.DateField()),
                ('waktu_masuk', models.TimeField(blank=True, null=True)),
                ('waktu_pulang', models.TimeField(blank=True, null=True)),
                ('keterangan', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('guru', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='absensi_dicatat', to='teachers.teacher')),
                ('kelas', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='absensi', to='academics.schoolclass')),
                ('siswa', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='absensi', to='students.student')),
            ],
            options={
                'ordering': ['-tanggal', '-id'],
                'indexes': [
                    models.Index(fields=['tanggal', 'status'], name='attendance_tanggal_status_idx'),
                    models.Index(fields=['kelas', 'tanggal'], name='attendance_kelas_tanggal_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('siswa', 'tanggal'), name='unique_absensi_per_siswa_per_day'),
                ],
            },
        ),
    ]
