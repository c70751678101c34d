import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AgentApplication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=255)),
                ('date_of_birth', models.DateField()),
                ('phone_number', models.CharField(max_length=20)),
                ('physical_address', models.TextField(max_length=500)),
                ('id_type', models.CharField(choices=[('National ID', 'National ID'), ('Passport', 'Passport')], max_length=20)),
                ('id_number', models.CharField(max_length=50)),
                ('id_document_path', models.CharField(max_length=255)),
                ('university_name', models.CharField(max_length=255)),
                ('campus', models.CharField(max_length=255)),
                ('student_id', models.CharField(max_length=100)),
                ('course', models.CharField(max_length=255)),
                ('year_of_study', models.CharField(choices=[('Year 1', 'Year 1'), ('Year 2', 'Year 2'), ('Year 3', 'Year 3'), ('Year 4', 'Year 4'), ('Year 5', 'Year 5'), ('Year 6', 'Year 6')], max_length=10)),
                ('university_email', models.EmailField(max_length=254)),
                ('student_id_document_path', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('rejection_reason', models.TextField(blank=True, null=True)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('terms_accepted', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_agent_applications', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='agent_applications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'agent_applications',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
