import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('teachers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SchoolClass',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nama_kelas', models.CharField(max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('wali_kelas', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='kelas_wali', to='teachers.teacher')),
            ],
            options={
                'ordering': ['nama_kelas', 'id'],
                'indexes': [models.Index(fields=['wali_kelas'], name='academics_kelas_wali_idx')],
            },
        ),
    ]
