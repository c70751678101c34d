from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('agent_applications', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddConstraint(
            model_name='agentapplication',
            constraint=models.UniqueConstraint(
                condition=models.Q(('status__in', ['pending', 'approved'])),
                fields=('user',),
                name='one_active_agent_application',
            ),
        ),
    ]
