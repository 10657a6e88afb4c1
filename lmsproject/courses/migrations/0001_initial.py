import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Course',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(db_column='title', max_length=255)),
                ('description', models.TextField(db_column='description')),
                ('category', models.CharField(db_column='category', max_length=100)),
                ('difficulty', models.CharField(db_column='difficulty', max_length=50)),
                ('duration', models.PositiveIntegerField(db_column='duration')),
                ('module_count', models.PositiveIntegerField(db_column='module_count', default=0)),
                ('lesson_count', models.PositiveIntegerField(db_column='lesson_count', default=0)),
                ('thumbnail', models.TextField(blank=True, db_column='thumbnail', null=True)),
                ('is_enrollment_required', models.BooleanField(db_column='is_enrollment_required', default=True)),
                ('created_by', models.ForeignKey(db_column='created_by', on_delete=django.db.models.deletion.CASCADE, related_name='created_courses', to=settings.AUTH_USER_MODEL)),
                ('instructor', models.ForeignKey(blank=True, db_column='instructor_id', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='instructed_courses', to=settings.AUTH_USER_MODEL)),
                ('tenant', models.ForeignKey(db_column='tenant_id', on_delete=django.db.models.deletion.CASCADE, related_name='courses', to='accounts.tenant')),
            ],
            options={
                'db_table': 'courses',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Module',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(db_column='title', max_length=255)),
                ('description', models.TextField(blank=True, db_column='description', null=True)),
                ('order', models.IntegerField(db_column='order')),
                ('course', models.ForeignKey(db_column='course_id', on_delete=django.db.models.deletion.CASCADE, related_name='modules', to='courses.course')),
            ],
            options={
                'db_table': 'modules',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Lesson',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(db_column='title', max_length=255)),
                ('content', models.TextField(db_column='content')),
                ('content_type', models.CharField(choices=[('video', 'video'), ('text', 'text'), ('pdf', 'pdf'), ('quiz', 'quiz')], db_column='content_type', max_length=20)),
                ('order', models.IntegerField(db_column='order')),
                ('duration', models.PositiveIntegerField(blank=True, db_column='duration', null=True)),
                ('is_required', models.BooleanField(db_column='is_required', default=True)),
                ('quiz_data', models.JSONField(blank=True, db_column='quiz_data', null=True)),
                ('module', models.ForeignKey(db_column='module_id', on_delete=django.db.models.deletion.CASCADE, related_name='lessons', to='courses.module')),
            ],
            options={
                'db_table': 'lessons',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Enrollment',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('enrolled_at', models.DateTimeField(db_column='enrolled_at', default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(blank=True, db_column='completed_at', null=True)),
                ('progress', models.PositiveSmallIntegerField(db_column='progress', default=0)),
                ('course', models.ForeignKey(db_column='course_id', on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='courses.course')),
                ('user', models.ForeignKey(db_column='user_id', on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'enrollments',
                'ordering': ['id'],
                'unique_together': {('user', 'course')},
            },
        ),
        migrations.CreateModel(
            name='LessonProgress',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('completed', models.BooleanField(db_column='completed', default=True)),
                ('completed_at', models.DateTimeField(db_column='completed_at', default=django.utils.timezone.now)),
                ('course', models.ForeignKey(db_column='course_id', on_delete=django.db.models.deletion.CASCADE, related_name='lesson_progress', to='courses.course')),
                ('lesson', models.ForeignKey(db_column='lesson_id', on_delete=django.db.models.deletion.CASCADE, related_name='progress', to='courses.lesson')),
                ('module', models.ForeignKey(db_column='module_id', on_delete=django.db.models.deletion.CASCADE, related_name='lesson_progress', to='courses.module')),
                ('user', models.ForeignKey(db_column='user_id', on_delete=django.db.models.deletion.CASCADE, related_name='lesson_progress', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'lesson_progress',
                'ordering': ['id'],
                'unique_together': {('user', 'lesson')},
            },
        ),
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_column='name', max_length=255)),
                ('batch_code', models.CharField(db_column='batch_code', max_length=50, unique=True)),
                ('start_date', models.DateField(db_column='start_date')),
                ('batch_time', models.CharField(db_column='batch_time', max_length=50)),
                ('created_at', models.DateTimeField(db_column='created_at', default=django.utils.timezone.now)),
                ('description', models.TextField(blank=True, db_column='description', null=True)),
                ('max_students', models.PositiveIntegerField(blank=True, db_column='max_students', null=True)),
                ('is_active', models.BooleanField(db_column='is_active', default=True)),
                ('course', models.ForeignKey(db_column='course_id', on_delete=django.db.models.deletion.CASCADE, related_name='batches', to='courses.course')),
                ('created_by', models.ForeignKey(db_column='created_by', on_delete=django.db.models.deletion.CASCADE, related_name='created_batches', to=settings.AUTH_USER_MODEL)),
                ('tenant', models.ForeignKey(db_column='tenant_id', on_delete=django.db.models.deletion.CASCADE, related_name='batches', to='accounts.tenant')),
                ('trainer', models.ForeignKey(db_column='trainer_id', on_delete=django.db.models.deletion.CASCADE, related_name='trained_batches', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'batches',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='BatchEnrollment',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('enrolled_at', models.DateTimeField(db_column='enrolled_at', default=django.utils.timezone.now)),
                ('status', models.CharField(choices=[('active', 'active'), ('completed', 'completed'), ('dropped', 'dropped')], db_column='status', default='active', max_length=20)),
                ('batch', models.ForeignKey(db_column='batch_id', on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='courses.batch')),
                ('enrolled_by', models.ForeignKey(db_column='enrolled_by', on_delete=django.db.models.deletion.CASCADE, related_name='batch_enrollments_made', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(db_column='user_id', on_delete=django.db.models.deletion.CASCADE, related_name='batch_enrollments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'batch_enrollments',
                'ordering': ['id'],
                'unique_together': {('batch', 'user')},
            },
        ),
    ]
