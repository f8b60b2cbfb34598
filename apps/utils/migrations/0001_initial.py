# apps/utils/migrations/0001_initial.py

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
    ]

    operations = [
        migrations.CreateModel(
            name='FinancialAuditLog',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('timestamp', models.DateTimeField(db_index=True, help_text="When this financial action occurred (in school's operational timezone)")),
                ('action', models.CharField(choices=[('RECORD_CREATE', 'Financial Record Created'), ('FEES_UPDATE', 'Fees Updated'), ('PAYMENT_RECEIVE', 'Payment Received'), ('DISCOUNT_APPLY', 'Discount Applied'), ('SCHOLARSHIP_APPLY', 'Scholarship Applied'), ('SCHOLARSHIP_REMOVE', 'Scholarship Removed'), ('ENROLLMENT_APPROVE', 'Enrollment Approved'), ('ENROLLMENT_REJECT', 'Enrollment Rejected'), ('FINANCIAL_DATA_EXPORT', 'Financial Data Exported')], db_index=True, max_length=30)),
                ('user_id', models.CharField(blank=True, db_index=True, help_text='ID of user who performed this action', max_length=100, null=True)),
                ('object_id', models.CharField(blank=True, max_length=100, null=True)),
                ('object_description', models.CharField(blank=True, max_length=500, null=True)),
                ('amount_involved', models.DecimalField(blank=True, decimal_places=2, help_text='Monetary amount involved in the action', max_digits=15, null=True)),
                ('currency', models.CharField(blank=True, default='PHP', max_length=3, null=True)),
                ('student_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('student_number', models.CharField(blank=True, max_length=50, null=True)),
                ('old_values', models.JSONField(blank=True, help_text='Values before change', null=True)),
                ('new_values', models.JSONField(blank=True, help_text='Values after change', null=True)),
                ('risk_level', models.CharField(choices=[('LOW', 'Low Risk'), ('MEDIUM', 'Medium Risk'), ('HIGH', 'High Risk'), ('CRITICAL', 'Critical Risk')], db_index=True, default='LOW', max_length=10)),
                ('additional_data', models.JSONField(blank=True, default=dict)),
                ('notes', models.TextField(blank=True, null=True)),
                ('is_automated', models.BooleanField(default=False)),
                ('content_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to='contenttypes.contenttype')),
            ],
            options={
                'verbose_name': 'Financial Audit Log',
                'verbose_name_plural': 'Financial Audit Logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['timestamp', 'action'], name='fin_audit_time_action_idx'),
                    models.Index(fields=['user_id', 'timestamp'], name='fin_audit_user_time_idx'),
                    models.Index(fields=['student_id', 'timestamp'], name='fin_audit_student_time_idx'),
                ],
            },
        ),
    ]
