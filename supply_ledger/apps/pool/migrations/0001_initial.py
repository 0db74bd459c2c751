import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PoolAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account", models.CharField(db_index=True, max_length=64, unique=True)),
                ("principal", models.DecimalField(decimal_places=0, default=0, max_digits=32)),
                ("tracking_accrued", models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ("tracking_index", models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="PoolState",
            fields=[
                ("id", models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ("total_principal", models.DecimalField(decimal_places=0, default=0, max_digits=36)),
                ("last_accrual_timestamp", models.BigIntegerField(default=0)),
                ("base_supply_index", models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="PrincipalUpdate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("account", models.CharField(db_index=True, max_length=64)),
                ("present_delta", models.DecimalField(decimal_places=0, max_digits=36)),
                ("principal_before", models.DecimalField(decimal_places=0, max_digits=32)),
                ("principal_after", models.DecimalField(decimal_places=0, max_digits=32)),
                ("base_supply_index", models.DecimalField(decimal_places=0, max_digits=20)),
                ("tracking_supply_index", models.DecimalField(decimal_places=0, max_digits=20)),
                ("tracking_accrued_delta", models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "indexes": [models.Index(fields=["account", "created_at"], name="pool_update_account_idx")],
            },
        ),
        migrations.CreateModel(
            name="PoolSnapshot",
            fields=[
                ("at", models.DateTimeField(primary_key=True, serialize=False)),
                ("total_pooled_value", models.DecimalField(decimal_places=0, max_digits=40)),
                ("total_principal", models.DecimalField(decimal_places=0, max_digits=36)),
                ("base_supply_index", models.DecimalField(decimal_places=0, max_digits=20)),
                ("tracking_supply_index", models.DecimalField(decimal_places=0, max_digits=20)),
                ("account_count", models.PositiveIntegerField(default=0)),
                ("principal_drift", models.DecimalField(decimal_places=0, default=0, max_digits=36)),
            ],
        ),
    ]
