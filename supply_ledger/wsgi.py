import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "supply_ledger.settings.base")

application = get_wsgi_application()
