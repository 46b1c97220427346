"""Shared test doubles — re-export memory backends and sample exports."""

from __future__ import annotations

from ghusage.models.usage_record import UsageRecord
from ghusage.persistence.memory_backend import MemoryCacheBackend, MemoryFileStore

SCENARIO_CSV = (
    "Date,Product,SKU,Quantity,Net_Amount,Organization,Repository_Slug\n"
    "2024-01-05,Actions,Linux,120,4.80,acme,acme/web\n"
    "2024-01-06,Actions,Actions - Storage,2,0.50,acme,acme/web\n"
    "2024-01-06,Packages,npm,10,1.00,acme,acme/api\n"
)

GITHUB_EXPORT_CSV = (
    "date,product,sku,quantity,unit_type,price_per_unit,gross_amount,discount_amount,"
    "net_amount,username,organization,repository,workflow_path,cost_center_name\n"
    "2024-02-01,actions,actions_linux,100,minutes,0.008,0.8,0,0.8,octo,acme,acme/web,ci.yml,eng\n"
    "2024-02-01,actions,actions_storage,5,gigabyte-hours,0.0003,0.0015,0,0.0015,octo,acme,acme/web,,eng\n"
    "2024-02-02,copilot,copilot_business,1,user-months,19,19,0,19,octo,acme,,,eng\n"
    "2024-03-01,codespaces,codespaces_compute_2core,3,hours,0.18,0.54,0,0.54,octo,beta,beta/app,,ops\n"
    "2024-03-02,packages,packages_storage,7,gigabyte-hours,0.0003,0.0021,0,0.0021,octo,beta,beta/lib,,ops\n"
)


def make_record(**overrides) -> UsageRecord:
    fields = {"date": "2024-01-01", "sku": "actions_linux", "product": "actions", "cost": 1.0, "quantity": 10.0}
    fields.update(overrides)
    return UsageRecord(**fields)


__all__ = ["GITHUB_EXPORT_CSV", "MemoryCacheBackend", "MemoryFileStore", "SCENARIO_CSV", "make_record"]
