from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('tasks', '0003_backfill_searchable_text'),
    ]

    operations = [
        migrations.AlterField(
            model_name='task',
            name='searchable_text',
            field=models.TextField(default='', editable=False),
        ),
    ]
