from django.db import migrations, models
from django.db.models import Max


def seed_sequence(apps, schema_editor):
    OrderModel = apps.get_model("orders", "OrderModel")
    OrderSequence = apps.get_model("orders", "OrderSequence")
    current = OrderModel.objects.aggregate(m=Max("internal_id"))["m"] or 0
    OrderSequence.objects.update_or_create(name="orders", defaults={"value": current})


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrderSequence",
            fields=[
                ("name", models.CharField(max_length=32, primary_key=True, serialize=False)),
                ("value", models.BigIntegerField(default=0)),
            ],
            options={
                "db_table": "order_sequences",
            },
        ),
        migrations.RunPython(seed_sequence, migrations.RunPython.noop),
    ]
