"""Contact point repository — writes of an organization's contact points.

Contact points are only written as part of their organization aggregate,
through ``insert_for_organization`` and ``reconcile``.
"""
import logging
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.errors import UnknownContactPointError
from db.models import ContactPoint

logger = logging.getLogger(__name__)

# API key -> contact_point column
_CONTACT_POINT_COLUMNS = {
    "email": "email",
    "telephone": "telephone",
    "name": "name",
    "contactType": "contact_type",
}


def contact_point_values(contact: dict[str, Any]) -> dict[str, Any]:
    """Map an API contact point to column values, dropping its identifier."""
    return {
        column: contact[key]
        for key, column in _CONTACT_POINT_COLUMNS.items()
        if key in contact
    }


def format_contact_point_for_api(contact_point: ContactPoint) -> dict[str, Any]:
    return {
        "identifier": contact_point.id,
        "email": contact_point.email,
        "telephone": contact_point.telephone,
        "name": contact_point.name,
        "contactType": contact_point.contact_type,
    }


def compute_deletion_set(ids_in_db: list, payload_entries: Iterable[dict]) -> list:
    """Return the ids of ``ids_in_db`` no payload entry references.

    Entries without an ``identifier`` reference nothing; identifiers unknown
    to ``ids_in_db`` are ignored.
    """
    referenced = {entry.get("identifier") for entry in payload_entries if entry.get("identifier")}
    return [id_ for id_ in ids_in_db if id_ not in referenced]


def _as_uuid(identifier: Any) -> Optional[UUID]:
    if identifier is None or identifier == "":
        return None
    if isinstance(identifier, UUID):
        return identifier
    try:
        return UUID(str(identifier))
    except ValueError:
        raise UnknownContactPointError(identifier)


async def get_ids_by_organization(session: AsyncSession, organization_id: UUID) -> list[UUID]:
    """Return the ids of the contact points currently owned by an organization."""
    result = await session.execute(
        select(ContactPoint.id).where(ContactPoint.organization_id == organization_id)
    )
    return list(result.scalars().all())


async def insert_for_organization(
    session: AsyncSession, organization_id: UUID, contacts: Iterable[dict[str, Any]]
) -> list[ContactPoint]:
    """Insert API contact points stamped with ``organization_id``."""
    contact_points = [
        ContactPoint(organization_id=organization_id, **contact_point_values(contact))
        for contact in contacts
    ]
    session.add_all(contact_points)
    await session.flush()
    return contact_points


async def reconcile(
    session: AsyncSession, organization_id: UUID, contacts: list[dict[str, Any]]
) -> None:
    """Make the stored contact points of an organization match ``contacts``.

    Entries with a known identifier are updated in place, entries without one
    are inserted, and stored contact points no entry references are deleted.
    An identifier the organization does not own raises
    UnknownContactPointError.
    """
    existing_ids = await get_ids_by_organization(session, organization_id)
    known = set(existing_ids)

    normalized = [{**contact, "identifier": _as_uuid(contact.get("identifier"))} for contact in contacts]

    to_insert = []
    for contact in normalized:
        identifier = contact["identifier"]
        if identifier is None:
            to_insert.append(contact)
            continue
        if identifier not in known:
            raise UnknownContactPointError(identifier)

        values = contact_point_values(contact)
        if values:
            await session.execute(
                update(ContactPoint).where(ContactPoint.id == identifier).values(**values)
            )

    if to_insert:
        await insert_for_organization(session, organization_id, to_insert)

    ids_to_delete = compute_deletion_set(existing_ids, normalized)
    if ids_to_delete:
        await session.execute(delete(ContactPoint).where(ContactPoint.id.in_(ids_to_delete)))

    await session.flush()
    logger.debug(
        "Reconciled contact points of %s: %d kept, %d inserted, %d deleted",
        organization_id,
        len(normalized) - len(to_insert),
        len(to_insert),
        len(ids_to_delete),
    )
