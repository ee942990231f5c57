from .organization import Address, ContactPoint, OrganizationPayload

__all__ = ["Address", "ContactPoint", "OrganizationPayload"]
