"""
facepay — pay with your face, get rewarded on-chain.

    from facepay import enrollment as EN   # Who has a registered face
    from facepay import payment as P       # Verify → transfer → reward
    from facepay import ledger as LG       # Ledger contract + MemoryLedger
    from facepay import face as F          # Face service contract + Luxand
    from facepay import status as ST       # Readiness snapshot
"""

from facepay import errors
from facepay import face
from facepay import ledger
from facepay import enrollment
from facepay import payment
from facepay import status
from facepay._types import Lazy
from facepay.config import Settings
from facepay.service import FacePayService

__version__ = "0.1.0"

__all__ = (
    "errors",
    "face",
    "ledger",
    "enrollment",
    "payment",
    "status",
    "Lazy",
    "Settings",
    "FacePayService",
)
