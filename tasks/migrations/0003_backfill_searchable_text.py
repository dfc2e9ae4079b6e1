from django.db import migrations

from tasks.search.backfill import backfill_all


class Migration(migrations.Migration):

    dependencies = [
        ('tasks', '0002_task_searchable_text'),
    ]

    operations = [
        migrations.RunPython(backfill_all, migrations.RunPython.noop),
    ]
