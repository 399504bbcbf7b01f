"""
Enrollment — who has a registered face.

    from facepay import enrollment as EN

    registrar = EN.EnrollmentRegistrar(EN.MemoryEnrollmentStore(), resolver)
    result = await registrar.enroll(address, photo)

    match result:
        case Ok(record):
            print(record.external_template_ref)
        case Error(e):
            print(e.kind.name, e.message)
"""

from facepay.enrollment._types import EnrolledIdentity
from facepay.enrollment._store import EnrollmentStore, MemoryEnrollmentStore
from facepay.enrollment._registrar import EnrollmentRegistrar
from facepay.enrollment._sqlalchemy import (
    EnrollmentRow,
    SQLAlchemyEnrollmentStore,
    create_enrollment_database,
)

__all__ = (
    "EnrolledIdentity",
    "EnrollmentStore",
    "MemoryEnrollmentStore",
    "EnrollmentRegistrar",
    "EnrollmentRow",
    "SQLAlchemyEnrollmentStore",
    "create_enrollment_database",
)
