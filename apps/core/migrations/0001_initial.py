# apps/core/migrations/0001_initial.py

from decimal import Decimal
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SchoolConfiguration',
            fields=[
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was created (in school's operational timezone)", verbose_name='Created At')),
                ('updated_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was last updated (in school's operational timezone)", verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('school_name', models.CharField(default='University of Perpetual Help System Laguna - Manila', max_length=200, verbose_name='School Name')),
                ('student_email_domain', models.CharField(default='manila.uphsl.edu.ph', help_text='Institutional student emails are <student id>@<domain>', max_length=100, verbose_name='Student Email Domain')),
                ('grading_scale', models.JSONField(blank=True, default=list, help_text='List of [minimum percentage, grade point] pairs, highest first', verbose_name='Grading Scale')),
                ('grade_weights', models.JSONField(blank=True, default=dict, help_text='Fractional weight per grade component; should sum to 1', verbose_name='Grade Component Weights')),
                ('passing_grade', models.DecimalField(decimal_places=2, default=Decimal('75.00'), help_text='Minimum final grade that satisfies a prerequisite', max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))], verbose_name='Passing Grade')),
            ],
            options={
                'verbose_name': 'School Configuration',
                'verbose_name_plural': 'School Configuration',
            },
        ),
        migrations.CreateModel(
            name='FinancialSettings',
            fields=[
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was created (in school's operational timezone)", verbose_name='Created At')),
                ('updated_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text="When this record was last updated (in school's operational timezone)", verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('currency', models.CharField(default='PHP', max_length=3, verbose_name='Currency')),
                ('currency_position', models.CharField(choices=[('BEFORE', 'Before amount'), ('AFTER', 'After amount')], default='BEFORE', max_length=10)),
                ('receipt_prefix', models.CharField(default='RCPT', help_text='Receipt numbers are <prefix>-<6 digit sequence>', max_length=10, verbose_name='Receipt Prefix')),
                ('per_unit_fee', models.DecimalField(decimal_places=2, default=Decimal('1000.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Tuition per Unit')),
                ('lab_fee_per_unit', models.DecimalField(decimal_places=2, default=Decimal('500.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Laboratory Fee per Lab Unit')),
                ('default_miscellaneous_fees', models.JSONField(blank=True, default=list, help_text='List of {name, amount} applied to every new enrollment assessment', verbose_name='Default Miscellaneous Fees')),
            ],
            options={
                'verbose_name': 'Financial Settings',
                'verbose_name_plural': 'Financial Settings',
            },
        ),
    ]
