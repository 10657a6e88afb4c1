import accounts.models
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_column='name', max_length=255)),
                ('subdomain', models.CharField(db_column='subdomain', max_length=100, unique=True)),
                ('created_at', models.DateTimeField(db_column='created_at', default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'tenants',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('username', models.CharField(db_column='username', max_length=150, unique=True)),
                ('first_name', models.CharField(db_column='first_name', max_length=100)),
                ('last_name', models.CharField(db_column='last_name', max_length=100)),
                ('email', models.EmailField(db_column='email', max_length=254)),
                ('mobile_number', models.CharField(db_column='mobile_number', max_length=30)),
                ('gender', models.CharField(blank=True, db_column='gender', max_length=20, null=True)),
                ('date_of_birth', models.CharField(db_column='date_of_birth', max_length=20)),
                ('profile_photo', models.CharField(blank=True, db_column='profile_photo', max_length=255, null=True)),
                ('education_level', models.CharField(db_column='education_level', max_length=100)),
                ('school_college', models.CharField(db_column='school_college', max_length=255)),
                ('year_of_study', models.CharField(db_column='year_of_study', max_length=50)),
                ('role', models.CharField(choices=[('student', 'student'), ('admin', 'admin'), ('superadmin', 'superadmin')], db_column='role', default='student', max_length=20)),
                ('is_active', models.BooleanField(db_column='is_active', default=True)),
                ('date_joined', models.DateTimeField(db_column='date_joined', default=django.utils.timezone.now)),
                ('tenant', models.ForeignKey(db_column='tenant_id', on_delete=django.db.models.deletion.PROTECT, related_name='users', to='accounts.tenant')),
            ],
            options={
                'db_table': 'users',
                'ordering': ['id'],
            },
            managers=[
                ('objects', accounts.models.UserManager()),
            ],
        ),
    ]
