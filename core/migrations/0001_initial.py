from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StoredCollection",
            fields=[
                ("name", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("records", models.JSONField(blank=True, default=list)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "record_collections",
                "ordering": ["name"],
            },
        ),
    ]
