"""Configuration for facepay.

Settings are read from environment variables, with a `.env` file loaded
first when present. Secrets (admin credential, face API token) are kept
out of repr.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

NETWORKS = ("devnet", "testnet", "mainnet")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        ledger_network: Ledger network name (devnet, testnet, mainnet)
        admin_credential: Key allowed to mint rewards, if configured
        reward_contract: Address of the reward token contract, if configured
        face_api_url: Base URL of the face-matching service
        face_api_token: API token for the face-matching service
        face_timeout: Per-request timeout for face service calls (seconds)
        ledger_timeout: Per-request timeout for ledger calls (seconds)
        face_min_confidence: Resolver-side match threshold (0..100)
        log_level: Logging level
    """

    ledger_network: str = "devnet"
    admin_credential: str | None = field(default=None, repr=False)
    reward_contract: str | None = None
    face_api_url: str = "https://api.luxand.cloud"
    face_api_token: str | None = field(default=None, repr=False)
    face_timeout: float = 15.0
    ledger_timeout: float = 30.0
    face_min_confidence: float = 0.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | None = None) -> Settings:
        """Load settings from the environment.

        Raises:
            ValueError: If a variable is present but invalid.
        """
        load_dotenv(env_file)

        network = os.getenv("FACEPAY_LEDGER_NETWORK", "devnet").strip().lower()
        if network not in NETWORKS:
            raise ValueError(f"FACEPAY_LEDGER_NETWORK must be one of {NETWORKS}, got {network!r}")

        log_level = os.getenv("FACEPAY_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"FACEPAY_LOG_LEVEL must be one of {LOG_LEVELS}, got {log_level!r}")

        face_min_confidence = _float_env("FACEPAY_FACE_MIN_CONFIDENCE", 0.0)
        if not 0.0 <= face_min_confidence <= 100.0:
            raise ValueError(
                f"FACEPAY_FACE_MIN_CONFIDENCE must be between 0 and 100, got {face_min_confidence}"
            )

        return cls(
            ledger_network=network,
            admin_credential=_optional_env("FACEPAY_ADMIN_CREDENTIAL"),
            reward_contract=_optional_env("FACEPAY_REWARD_CONTRACT"),
            face_api_url=os.getenv("FACEPAY_FACE_API_URL", "https://api.luxand.cloud"),
            face_api_token=_optional_env("FACEPAY_FACE_API_TOKEN"),
            face_timeout=_positive_float_env("FACEPAY_FACE_TIMEOUT", 15.0),
            ledger_timeout=_positive_float_env("FACEPAY_LEDGER_TIMEOUT", 30.0),
            face_min_confidence=face_min_confidence,
            log_level=log_level,
        )


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _positive_float_env(name: str, default: float) -> float:
    value = _float_env(name, default)
    if not value > 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value
