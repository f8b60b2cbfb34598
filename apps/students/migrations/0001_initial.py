# apps/students/migrations/0001_initial.py

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django_countries.fields
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StudentProfile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was created (in school's operational timezone)", verbose_name='Created At')),
                ('updated_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was last updated (in school's operational timezone)", verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('student_id', models.CharField(db_index=True, help_text='Issued on registration, e.g. m26-147-100', max_length=20, unique=True, verbose_name='Student ID')),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Institutional Email')),
                ('cohort_prefix', models.CharField(blank=True, editable=False, max_length=10, null=True)),
                ('sequence', models.PositiveSmallIntegerField(blank=True, editable=False, null=True)),
                ('first_name', models.CharField(max_length=50, verbose_name='First Name')),
                ('middle_name', models.CharField(blank=True, max_length=50, verbose_name='Middle Name')),
                ('last_name', models.CharField(max_length=50, verbose_name='Last Name')),
                ('birth_date', models.DateField(blank=True, null=True, verbose_name='Birth Date')),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female'), ('other', 'Other')], max_length=10, verbose_name='Gender')),
                ('nationality', django_countries.fields.CountryField(blank=True, default='PH', max_length=2, verbose_name='Nationality')),
                ('guardian_name', models.CharField(blank=True, max_length=100)),
                ('guardian_contact', models.CharField(blank=True, max_length=30)),
                ('emergency_contact', models.CharField(blank=True, max_length=30)),
                ('department', models.CharField(choices=[('BSIT', 'BS Information Technology'), ('BSCS', 'BS Computer Science'), ('BSN', 'BS Nursing'), ('BS RADTECH', 'BS Radiologic Technology'), ('SHS', 'Senior High School'), ('JHS', 'Junior High School')], max_length=20, verbose_name='Department')),
                ('program', models.CharField(blank=True, max_length=100, verbose_name='Program')),
                ('year_level', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(6)], verbose_name='Year Level')),
                ('academic_status', models.CharField(choices=[('regular', 'Regular'), ('irregular', 'Irregular'), ('probation', 'Probation'), ('LOA', 'Leave of Absence'), ('graduated', 'Graduated'), ('transferred', 'Transferred')], default='regular', max_length=20)),
                ('enrollment_year', models.PositiveIntegerField(help_text="Calendar year of admission; must match the ID's year segment", verbose_name='Enrollment Year')),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='student_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Student Profile',
                'verbose_name_plural': 'Student Profiles',
                'ordering': ['last_name', 'first_name'],
                'constraints': [
                    models.UniqueConstraint(fields=('cohort_prefix', 'sequence'), name='unique_student_cohort_sequence'),
                ],
            },
        ),
    ]
