"""
Service status — readiness computed once from configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from facepay.config import Settings


@dataclass(frozen=True, slots=True)
class ServiceStatus:
    """
    Read-only readiness snapshot.

    The *_configured flags reflect settings; ledger_client_ready reflects
    whether the ledger actually in use can mint rewards.
    """

    network: str
    reward_contract_configured: bool
    admin_credential_configured: bool
    ledger_client_ready: bool

    @property
    def ready(self) -> bool:
        return (
            self.reward_contract_configured
            and self.admin_credential_configured
            and self.ledger_client_ready
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "network": self.network,
            "reward_contract_configured": self.reward_contract_configured,
            "admin_credential_configured": self.admin_credential_configured,
            "ledger_client_ready": self.ledger_client_ready,
            "ready": self.ready,
        }


class ServiceStatusRegistry:
    """
    Holds the status snapshot set at startup.

    There is no mutation API: the snapshot is whatever configuration
    loading produced.
    """

    __slots__ = ("_status",)

    def __init__(self, status: ServiceStatus) -> None:
        self._status = status

    @classmethod
    def from_settings(cls, settings: Settings, *, ledger_client_ready: bool) -> ServiceStatusRegistry:
        return cls(ServiceStatus(
            network=settings.ledger_network,
            reward_contract_configured=bool(settings.reward_contract),
            admin_credential_configured=bool(settings.admin_credential),
            ledger_client_ready=ledger_client_ready,
        ))

    def get_status(self) -> ServiceStatus:
        return self._status

    def is_ready(self) -> bool:
        return self._status.ready


__all__ = ("ServiceStatus", "ServiceStatusRegistry")
