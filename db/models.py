"""SQLAlchemy 2.0 ORM models for the job board API.

Covers the organization aggregate:
  - organization: hiring organizations, address stored flat
  - contact_point: contact channels owned by one organization
"""

import uuid
from typing import Optional

from sqlalchemy import UUID, ForeignKey, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


# API address key -> flat organization column, exposed nested as ``address``.
ADDRESS_FIELDS = {
    "addressCountry": "address_country",
    "addressLocality": "address_locality",
    "postalCode": "postal_code",
    "streetAddress": "street_address",
}
ADDRESS_COLUMNS = tuple(ADDRESS_FIELDS.values())


class Organization(Base):
    """organization — a company publishing job postings."""

    __tablename__ = "organization"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address_country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address_locality: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    street_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationship
    contact_points: Mapped[list["ContactPoint"]] = relationship(
        "ContactPoint",
        back_populates="organization",
        order_by="ContactPoint.contact_type",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContactPoint(Base):
    """contact_point — email/phone channel of an organization."""

    __tablename__ = "contact_point"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
    )
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    telephone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contact_type: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationship
    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="contact_points"
    )
