from django.contrib import admin
from .models import PoolAccount, PoolState, PrincipalUpdate, PoolSnapshot


@admin.register(PoolAccount)
class PoolAccountAdmin(admin.ModelAdmin):
    list_display = ("account", "principal", "tracking_accrued", "tracking_index", "updated_at")
    search_fields = ("account",)


@admin.register(PoolState)
class PoolStateAdmin(admin.ModelAdmin):
    list_display = ("id", "total_principal", "base_supply_index", "last_accrual_timestamp", "updated_at")


@admin.register(PrincipalUpdate)
class PrincipalUpdateAdmin(admin.ModelAdmin):
    list_display = ("account", "present_delta", "principal_before", "principal_after", "created_at")
    search_fields = ("account",)
    date_hierarchy = "created_at"


@admin.register(PoolSnapshot)
class PoolSnapshotAdmin(admin.ModelAdmin):
    list_display = ("at", "total_pooled_value", "total_principal", "base_supply_index", "principal_drift")
