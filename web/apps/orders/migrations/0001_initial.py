import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="OrderModel",
            fields=[
                ("id", models.CharField(editable=False, max_length=32, primary_key=True, serialize=False)),
                ("internal_id", models.BigIntegerField(editable=False, null=True, unique=True)),
                ("owner_id", models.CharField(db_index=True, max_length=64)),
                ("restaurant_id", models.CharField(max_length=64)),
                (
                    "status",
                    models.CharField(
                        choices=[("created", "Created"), ("placed", "Placed"), ("cancelled", "Cancelled")],
                        default="created",
                        max_length=16,
                    ),
                ),
                (
                    "country",
                    models.CharField(
                        choices=[("India", "India"), ("America", "America")],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                ("total_cents", models.PositiveIntegerField(default=0)),
                ("payment_method_id", models.CharField(blank=True, max_length=64, null=True)),
                ("created_at", models.DateTimeField()),
            ],
            options={
                "db_table": "orders",
                "ordering": ["internal_id"],
            },
        ),
        migrations.CreateModel(
            name="OrderItemModel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField()),
                ("menu_item_id", models.CharField(max_length=64)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price_cents", models.PositiveIntegerField()),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.ordermodel",
                    ),
                ),
            ],
            options={
                "db_table": "order_items",
                "ordering": ["position"],
                "constraints": [
                    models.UniqueConstraint(fields=("order", "position"), name="uniq_order_item_position"),
                ],
            },
        ),
    ]
