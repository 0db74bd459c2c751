from decimal import Decimal

from django.db import models


class WideIntegerField(models.Field):
    """
    Integer column wider than BIGINT (uint64 indices, uint104 principal).

    PostgreSQL stores it as an exact NUMERIC. Every other backend gets a TEXT
    column: SQLite's decimal support reads values back through a float and
    drops digits past the 15th. Python always sees a plain ``int``.
    """

    description = "Integer of up to %(digits)s decimal digits"

    def __init__(self, *args, digits=78, **kwargs):
        self.digits = digits
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        kwargs["digits"] = self.digits
        return name, path, args, kwargs

    def db_type(self, connection):
        if connection.vendor == "postgresql":
            return f"numeric({self.digits}, 0)"
        return "text"

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        return int(value)

    def to_python(self, value):
        if value is None or isinstance(value, int):
            return value
        return int(Decimal(str(value)))

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        return self.to_python(value)

    def get_db_prep_value(self, value, connection, prepared=False):
        if not prepared:
            value = self.get_prep_value(value)
        if value is None:
            return value
        if connection.vendor == "postgresql":
            return Decimal(value)
        return str(value)
