"""Organization API payload schemas."""
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address_country: Optional[str] = Field(default=None, alias="addressCountry")
    address_locality: Optional[str] = Field(default=None, alias="addressLocality")
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    street_address: Optional[str] = Field(default=None, alias="streetAddress")


class ContactPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    identifier: Optional[UUID] = None  # absent for new contact points
    email: Optional[str] = None
    telephone: Optional[str] = None
    name: Optional[str] = None
    contact_type: str = Field(alias="contactType", min_length=1)


class OrganizationPayload(BaseModel):
    """Body of POST/PUT /api/organizations."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None
    email: Optional[str] = None
    address: Address
    contact_points: List[ContactPoint] = Field(default_factory=list, alias="contactPoints")
