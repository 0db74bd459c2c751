from django.db import migrations

import supply_ledger.apps.pool.fields

WIDE = supply_ledger.apps.pool.fields.WideIntegerField

FIELDS = [
    ("poolaccount", "principal", 32, 0),
    ("poolaccount", "tracking_accrued", 20, 0),
    ("poolaccount", "tracking_index", 20, 0),
    ("poolstate", "total_principal", 36, 0),
    ("poolstate", "base_supply_index", 20, 0),
    ("principalupdate", "present_delta", 36, None),
    ("principalupdate", "principal_before", 32, None),
    ("principalupdate", "principal_after", 32, None),
    ("principalupdate", "base_supply_index", 20, None),
    ("principalupdate", "tracking_supply_index", 20, None),
    ("principalupdate", "tracking_accrued_delta", 20, 0),
    ("poolsnapshot", "total_pooled_value", 40, None),
    ("poolsnapshot", "total_principal", 36, None),
    ("poolsnapshot", "base_supply_index", 20, None),
    ("poolsnapshot", "tracking_supply_index", 20, None),
    ("poolsnapshot", "principal_drift", 36, 0),
]


def _field(digits, default):
    if default is None:
        return WIDE(digits=digits)
    return WIDE(digits=digits, default=default)


class Migration(migrations.Migration):

    dependencies = [
        ("pool", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(model_name=model, name=name, field=_field(digits, default))
        for model, name, digits, default in FIELDS
    ]
