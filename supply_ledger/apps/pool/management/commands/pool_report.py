import json
from django.core.management.base import BaseCommand, CommandError

from supply_ledger.apps.pool.errors import AccrualError
from supply_ledger.apps.pool.services.ledger import get_default_ledger
from supply_ledger.apps.pool.tasks import reconcile_pool, snapshot_pool


class Command(BaseCommand):
    help = "Show pool totals or one account, optionally snapshotting or reconciling."

    def add_arguments(self, parser):
        parser.add_argument(
            "--account", dest="account", help="Show a single account instead of pool totals."
        )
        parser.add_argument(
            "--snapshot", action="store_true", help="Write a PoolSnapshot row."
        )
        parser.add_argument(
            "--reconcile",
            action="store_true",
            help="Compare the pool principal counter with the per-account sum.",
        )

    def handle(self, *args, **options):
        try:
            ledger = get_default_ledger()
            if options["account"]:
                record = ledger.get_account(options["account"])
                if record is None:
                    raise CommandError(f"Unknown account {options['account']}")
                payload = {
                    "account": record.account,
                    "principal": str(record.principal),
                    "balance": str(ledger.balance_of(record.account)),
                    "tracking_accrued": str(record.tracking_accrued),
                }
            elif options["snapshot"]:
                payload = snapshot_pool()
            else:
                payload = {
                    "total_pooled_value": str(ledger.total_pooled_value()),
                    "total_principal": str(ledger.total_principal()),
                }
        except AccrualError as e:
            raise CommandError(f"{e.__class__.__name__}: {e}")

        self.stdout.write(json.dumps(payload, indent=2, default=str))

        if options["reconcile"]:
            drift = reconcile_pool()
            if drift["drift"]:
                raise CommandError(f"Principal drift detected: {drift}")
            self.stdout.write(self.style.SUCCESS("Pool principal reconciled."))
