"""Repository exceptions.

Raised inside a transaction so that ``get_db`` rolls it back; the repository
facade converts them into result values.
"""
from typing import Any


class RepositoryError(Exception):
    """Base class for errors raised by the repository layer."""


class UnknownContactPointError(RepositoryError):
    """A payload contact point references an id the organization does not own."""

    def __init__(self, identifier: Any):
        super().__init__(f"Contact point {identifier} does not belong to this organization")
        self.identifier = identifier
