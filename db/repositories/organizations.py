"""Organization repository — listing, reads and aggregate writes.

An organization is written together with its contact points as one unit;
every public function returns a ``Result`` instead of raising persistence
errors.
"""
import logging
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import Select, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from db.connection import get_db
from db.errors import RepositoryError
from db.models import ADDRESS_COLUMNS, ADDRESS_FIELDS, Organization
from db.pagination import paginate
from db.repositories import contact_points as contact_points_repo
from db.results import Err, Ok, Result
from db.sanitizers import sanitize_filters, sanitize_pagination, sanitize_sort

logger = logging.getLogger(__name__)

ORGANIZATION_FILTERABLE_FIELDS = ("name", "address_locality", "postal_code")
ORGANIZATION_SORTABLE_FIELDS = ("name", "id", "address_locality", "postal_code")

ApiData = Union[BaseModel, dict[str, Any]]


# ---------------------------------------------------------------------------
# Query builder
# ---------------------------------------------------------------------------


def build_filtered_query(filters: dict[str, Any]) -> Select:
    """Select organizations matching already sanitized filters.

    ``name`` matches as a substring, ``address_locality`` and ``postal_code``
    as a prefix, any other key by equality.
    """
    filters = dict(filters)
    name = filters.pop("name", None)
    address_locality = filters.pop("address_locality", None)
    postal_code = filters.pop("postal_code", None)

    columns = Organization.__table__.c
    query = select(Organization).where(*(columns[key] == value for key, value in filters.items()))

    if name:
        query = query.where(Organization.name.contains(name, autoescape=True))
    if address_locality:
        query = query.where(Organization.address_locality.startswith(address_locality, autoescape=True))
    if postal_code:
        query = query.where(Organization.postal_code.startswith(postal_code, autoescape=True))
    return query


def build_list_query(filters: dict[str, Any], sort: list[str]) -> Select:
    """Filtered organizations with their contact points, sorted by ``[column, direction]``."""
    query = build_filtered_query(filters).options(selectinload(Organization.contact_points))

    if sort:
        column, direction = sort
        order = Organization.__table__.c[column]
        query = query.order_by(order.desc() if direction.lower() == "desc" else order.asc())
    return query


def build_single_query(organization_id: UUID) -> Select:
    return (
        select(Organization)
        .where(Organization.id == organization_id)
        .options(selectinload(Organization.contact_points))
    )


# ---------------------------------------------------------------------------
# API shape <-> storage shape
# ---------------------------------------------------------------------------


def organization_row(organization: Organization) -> dict[str, Any]:
    """Flat row of an organization, contact points embedded (None when empty)."""
    row = {column.key: getattr(organization, column.key) for column in Organization.__table__.columns}
    row["contact_points"] = [
        contact_points_repo.format_contact_point_for_api(contact_point)
        for contact_point in organization.contact_points
    ] or None
    return row


def format_organization_for_api(row: dict[str, Any]) -> dict[str, Any]:
    """Nest the flat address columns under ``address`` as the API expects."""
    formatted = {key: value for key, value in row.items() if key not in ADDRESS_COLUMNS}
    if "contact_points" in formatted:
        formatted["contactPoints"] = formatted.pop("contact_points")
    formatted["address"] = {
        api_key: row[column] for api_key, column in ADDRESS_FIELDS.items() if column in row
    }
    return formatted


def prepare_organization_data_for_save(api_data: dict[str, Any]) -> dict[str, Any]:
    """Split validated API data into an organization record and its contact points.

    ``contact_point`` (the first contact point alone) is kept for callers
    still using a single contact.
    """
    address = api_data.get("address") or {}
    contact_points = list(api_data.get("contactPoints") or [])

    organization = {
        key: value for key, value in api_data.items() if key not in ("address", "contactPoints")
    }
    organization.update(
        {column: address.get(api_key) for api_key, column in ADDRESS_FIELDS.items()}
    )

    return {
        "organization": organization,
        "contact_point": contact_points[0] if contact_points else None,
        "contact_points": contact_points,
    }


def _api_dict(api_data: ApiData) -> dict[str, Any]:
    if isinstance(api_data, BaseModel):
        return api_data.model_dump(by_alias=True, exclude_unset=True)
    return dict(api_data)


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------


async def _fetch_organization(session: AsyncSession, organization_id: UUID) -> Optional[dict[str, Any]]:
    result = await session.execute(build_single_query(organization_id))
    organization = result.scalar_one_or_none()
    if organization is None:
        return None
    return format_organization_for_api(organization_row(organization))


async def get_organization_paginated_list(
    session_factory: async_sessionmaker[AsyncSession],
    filters: Any = None,
    sort: Any = None,
    pagination: Any = None,
) -> Result:
    """Return one page of filtered organizations and its pagination metadata.

    ``filters``, ``sort`` and ``pagination`` are raw query parameters; they
    are sanitized against the organization whitelists here.
    """
    clean_filters = sanitize_filters(filters, ORGANIZATION_FILTERABLE_FIELDS)
    clean_sort = sanitize_sort(sort, ORGANIZATION_SORTABLE_FIELDS)
    per_page, current_page = sanitize_pagination(pagination)

    try:
        async with session_factory() as session:
            organizations, page = await paginate(
                session,
                build_list_query(clean_filters, clean_sort),
                build_filtered_query(clean_filters),
                per_page,
                current_page,
            )
    except SQLAlchemyError as exc:
        logger.warning("Listing organizations failed: %s", exc)
        return Err.from_exception(exc)

    return Ok(
        value={
            "organizations": [
                format_organization_for_api(organization_row(organization))
                for organization in organizations
            ],
            "pagination": page,
        }
    )


async def get_organization(
    session_factory: async_sessionmaker[AsyncSession], organization_id: UUID
) -> Result:
    """Return the organization aggregate, ``Ok(None)`` when it does not exist."""
    try:
        async with session_factory() as session:
            organization = await _fetch_organization(session, organization_id)
    except SQLAlchemyError as exc:
        logger.warning("Reading organization %s failed: %s", organization_id, exc)
        return Err.from_exception(exc)
    return Ok(value=organization)


async def create_organization(
    session_factory: async_sessionmaker[AsyncSession], api_data: ApiData
) -> Result:
    """Insert an organization and all its contact points in one transaction."""
    data = prepare_organization_data_for_save(_api_dict(api_data))
    # id is generated on insert
    organization = {key: value for key, value in data["organization"].items() if key != "id"}

    try:
        async with get_db(session_factory) as session:
            result = await session.execute(
                insert(Organization).values(**organization).returning(Organization.id)
            )
            organization_id = result.scalar_one()
            await contact_points_repo.insert_for_organization(
                session, organization_id, data["contact_points"]
            )
    except (SQLAlchemyError, RepositoryError) as exc:
        logger.warning("Creating organization failed: %s", exc)
        return Err.from_exception(exc)

    logger.info(
        "Created organization %s with %d contact point(s)",
        organization_id,
        len(data["contact_points"]),
    )
    return await get_organization(session_factory, organization_id)


async def update_organization(
    session_factory: async_sessionmaker[AsyncSession],
    organization_id: UUID,
    api_data: ApiData,
) -> Result:
    """Update an organization and reconcile its contact points in one transaction.

    Returns ``Ok(None)`` when the organization does not exist.
    """
    data = prepare_organization_data_for_save(_api_dict(api_data))
    # id is immutable once assigned
    organization = {key: value for key, value in data["organization"].items() if key != "id"}

    try:
        async with get_db(session_factory) as session:
            result = await session.execute(
                update(Organization)
                .where(Organization.id == organization_id)
                .values(**organization)
            )
            found = result.rowcount > 0
            if found:
                await contact_points_repo.reconcile(
                    session, organization_id, data["contact_points"]
                )
    except (SQLAlchemyError, RepositoryError) as exc:
        logger.warning("Updating organization %s failed: %s", organization_id, exc)
        return Err.from_exception(exc)

    if not found:
        logger.info("Organization %s not found, nothing updated", organization_id)
        return Ok(value=None)
    logger.info("Updated organization %s", organization_id)
    return await get_organization(session_factory, organization_id)


async def delete_organization(
    session_factory: async_sessionmaker[AsyncSession], organization_id: UUID
) -> Result:
    """Delete an organization; ``Ok({})`` when there was nothing to delete."""
    try:
        async with get_db(session_factory) as session:
            result = await session.execute(
                delete(Organization).where(Organization.id == organization_id)
            )
            deleted = result.rowcount
    except SQLAlchemyError as exc:
        logger.warning("Deleting organization %s failed: %s", organization_id, exc)
        return Err.from_exception(exc)

    if not deleted:
        return Ok(value={})
    logger.info("Deleted organization %s", organization_id)
    return Ok(value={"id": organization_id})
