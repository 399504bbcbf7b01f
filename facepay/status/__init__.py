"""
Status — pre-flight readiness for payments and health checks.

    from facepay import status as ST

    registry = ST.ServiceStatusRegistry.from_settings(settings, ledger_client_ready=ledger.can_mint)
    if not registry.is_ready():
        ...
"""

from facepay.status._registry import ServiceStatus, ServiceStatusRegistry

__all__ = ("ServiceStatus", "ServiceStatusRegistry")
