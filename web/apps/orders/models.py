from django.db import models, transaction


class OrderSequence(models.Model):
    """Named counter backing order ids.

    Callers lock the counter row before incrementing it, so concurrent
    creates are serialized on that row and never see the same value.
    Values are never handed out twice, even when orders are deleted.
    """

    name = models.CharField(primary_key=True, max_length=32)
    value = models.BigIntegerField(default=0)

    class Meta:
        db_table = "order_sequences"

    @classmethod
    def next_value(cls, name: str = "orders") -> int:
        with transaction.atomic():
            cls.objects.get_or_create(name=name)
            seq = cls.objects.select_for_update().get(name=name)
            seq.value += 1
            seq.save(update_fields=["value"])
            return seq.value


class OrderModel(models.Model):
    # Public id exposed in the API: "o<internal_id>"
    id = models.CharField(primary_key=True, max_length=32, editable=False)

    # Internal incrementing counter
    internal_id = models.BigIntegerField(unique=True, editable=False, null=True)

    class Status(models.TextChoices):
        CREATED = "created"
        PLACED = "placed"
        CANCELLED = "cancelled"

    class Country(models.TextChoices):
        INDIA = "India"
        AMERICA = "America"

    owner_id = models.CharField(max_length=64, db_index=True)
    restaurant_id = models.CharField(max_length=64)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.CREATED)
    country = models.CharField(max_length=32, choices=Country.choices, db_index=True)
    total_cents = models.PositiveIntegerField(default=0)
    payment_method_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "orders"
        ordering = ["internal_id"]

    def save(self, *args, **kwargs):
        # Assign `internal_id` (and the public id) only on creation
        if self.internal_id is None:
            with transaction.atomic():
                self.internal_id = OrderSequence.next_value()
                self.id = f"o{self.internal_id}"
                # never fall back to an UPDATE of an existing row
                kwargs["force_insert"] = True
                super().save(*args, **kwargs)
            return

        super().save(*args, **kwargs)


class OrderItemModel(models.Model):
    order = models.ForeignKey(OrderModel, related_name="items", on_delete=models.CASCADE)
    position = models.PositiveIntegerField()
    menu_item_id = models.CharField(max_length=64)
    quantity = models.PositiveIntegerField()
    unit_price_cents = models.PositiveIntegerField()

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["order", "position"], name="uniq_order_item_position"),
        ]
