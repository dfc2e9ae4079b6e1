from django.db import migrations, models

from tasks.search.indexes import create_trigram_indexes, drop_trigram_indexes


class Migration(migrations.Migration):

    dependencies = [
        ('tasks', '0001_initial'),
        ('crm', '0001_initial'),
        ('locations', '0001_initial'),
    ]

    operations = [
        # Nullable until the backfill has run
        migrations.AddField(
            model_name='task',
            name='searchable_text',
            field=models.TextField(editable=False, null=True),
        ),
        migrations.RunPython(create_trigram_indexes, drop_trigram_indexes),
    ]
