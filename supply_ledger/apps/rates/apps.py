from django.apps import AppConfig


class RatesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'supply_ledger.apps.rates'
    verbose_name = 'Rates'
