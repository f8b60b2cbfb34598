# apps/hr/migrations/0001_initial.py

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TeacherProfile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was created (in school's operational timezone)", verbose_name='Created At')),
                ('updated_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was last updated (in school's operational timezone)", verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('employee_id', models.CharField(db_index=True, help_text='Issued on registration, e.g. T1426-1001', max_length=20, unique=True, verbose_name='Employee ID')),
                ('first_name', models.CharField(max_length=50, verbose_name='First Name')),
                ('middle_name', models.CharField(blank=True, max_length=50, verbose_name='Middle Name')),
                ('last_name', models.CharField(max_length=50, verbose_name='Last Name')),
                ('email', models.EmailField(max_length=254, verbose_name='Email')),
                ('contact_number', models.CharField(blank=True, max_length=30)),
                ('department', models.CharField(choices=[('BSIT', 'BS Information Technology'), ('BSCS', 'BS Computer Science'), ('BSN', 'BS Nursing'), ('BS RADTECH', 'BS Radiologic Technology'), ('SHS', 'Senior High School'), ('JHS', 'Junior High School')], max_length=20, verbose_name='Department')),
                ('position', models.CharField(max_length=100, verbose_name='Position')),
                ('specializations', models.JSONField(blank=True, default=list)),
                ('date_hired', models.DateField(verbose_name='Date Hired')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('on leave', 'On Leave')], default='active', max_length=10)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='teacher_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Teacher Profile',
                'verbose_name_plural': 'Teacher Profiles',
                'ordering': ['last_name', 'first_name'],
            },
        ),
    ]
