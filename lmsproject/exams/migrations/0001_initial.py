import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('courses', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Exam',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(db_column='title', max_length=255)),
                ('description', models.TextField(db_column='description')),
                ('exam_type', models.CharField(choices=[('mcq', 'Multiple choice'), ('written', 'Written')], db_column='exam_type', default='mcq', max_length=20)),
                ('duration', models.PositiveIntegerField(db_column='duration', default=30)),
                ('max_attempts', models.PositiveIntegerField(db_column='max_attempts', default=1)),
                ('start_time', models.DateTimeField(blank=True, db_column='start_time', null=True)),
                ('end_time', models.DateTimeField(blank=True, db_column='end_time', null=True)),
                ('accepting_responses', models.BooleanField(db_column='accepting_responses', default=True)),
                ('created_at', models.DateTimeField(db_column='created_at', default=django.utils.timezone.now)),
                ('course', models.ForeignKey(db_column='course_id', on_delete=django.db.models.deletion.CASCADE, related_name='exams', to='courses.course')),
                ('created_by', models.ForeignKey(db_column='created_by', on_delete=django.db.models.deletion.CASCADE, related_name='created_exams', to=settings.AUTH_USER_MODEL)),
                ('tenant', models.ForeignKey(db_column='tenant_id', on_delete=django.db.models.deletion.CASCADE, related_name='exams', to='accounts.tenant')),
            ],
            options={
                'db_table': 'exams',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.TextField(db_column='text')),
                ('order', models.IntegerField(db_column='order')),
                ('options', models.JSONField(blank=True, db_column='options', default=list)),
                ('correct_option', models.IntegerField(blank=True, db_column='correct_option', null=True)),
                ('exam', models.ForeignKey(db_column='exam_id', on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='exams.exam')),
            ],
            options={
                'db_table': 'questions',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='ExamAttempt',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('started_at', models.DateTimeField(db_column='started_at', default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(blank=True, db_column='completed_at', null=True)),
                ('answers', models.JSONField(blank=True, db_column='answers', null=True)),
                ('score', models.PositiveSmallIntegerField(blank=True, db_column='score', null=True)),
                ('feedback', models.TextField(blank=True, db_column='feedback', null=True)),
                ('reviewed_at', models.DateTimeField(blank=True, db_column='reviewed_at', null=True)),
                ('exam', models.ForeignKey(db_column='exam_id', on_delete=django.db.models.deletion.CASCADE, related_name='attempts', to='exams.exam')),
                ('user', models.ForeignKey(db_column='user_id', on_delete=django.db.models.deletion.CASCADE, related_name='exam_attempts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'exam_attempts',
                'ordering': ['-started_at', '-id'],
                'indexes': [models.Index(fields=['user', 'exam'], name='attempt_user_exam_idx')],
            },
        ),
    ]
