"""Result values returned by the repository facade.

Every public repository operation returns either ``Ok`` holding its value or
``Err`` holding an error classification, never a raw persistence exception.
"""
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import IntegrityError

from db.errors import UnknownContactPointError


class ErrorKind(str, Enum):
    INTEGRITY = "integrity"
    PERSISTENCE = "persistence"
    UNKNOWN_CONTACT_POINT = "unknown_contact_point"


class Ok(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: Literal[True] = True
    value: Any = None


class Err(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: Exception) -> "Err":
        if isinstance(exc, UnknownContactPointError):
            kind = ErrorKind.UNKNOWN_CONTACT_POINT
        elif isinstance(exc, IntegrityError):
            kind = ErrorKind.INTEGRITY
        else:
            kind = ErrorKind.PERSISTENCE
        return cls(kind=kind, message=str(exc))


Result = Union[Ok, Err]
