"""Unit tests for the pure organization/contact point mapping helpers."""
import uuid

from db.repositories.contact_points import compute_deletion_set, contact_point_values
from db.repositories.organizations import (
    format_organization_for_api,
    prepare_organization_data_for_save,
)
from schemas import OrganizationPayload
from tests.factories import organization_payload


class TestPrepareOrganizationDataForSave:
    def test_flattens_address_and_strips_nested_keys(self):
        data = prepare_organization_data_for_save(organization_payload(name="Flat Corp"))

        organization = data["organization"]
        assert "address" not in organization
        assert "contactPoints" not in organization
        assert organization["name"] == "Flat Corp"
        assert organization["address_country"] == "FR"
        assert organization["address_locality"] == "Caen"
        assert organization["postal_code"] == "14000"
        assert organization["street_address"] == "1 rue de la Paix"

    def test_exposes_contact_points_and_first_contact(self):
        contacts = [
            {"email": "a@x.com", "contactType": "phone"},
            {"email": "b@x.com", "contactType": "email"},
        ]
        data = prepare_organization_data_for_save(organization_payload(contacts=contacts))

        assert data["contact_points"] == contacts
        assert data["contact_point"] == contacts[0]

    def test_missing_address_fields_are_stored_as_null(self):
        payload = organization_payload()
        payload["address"] = {"addressLocality": "Caen"}

        organization = prepare_organization_data_for_save(payload)["organization"]

        assert organization["address_country"] is None
        assert organization["postal_code"] is None
        assert organization["street_address"] is None
        assert organization["address_locality"] == "Caen"

    def test_no_contact_points(self):
        payload = organization_payload(contacts=[])
        data = prepare_organization_data_for_save(payload)
        assert data["contact_points"] == []
        assert data["contact_point"] is None

    def test_does_not_mutate_input(self):
        payload = organization_payload()
        prepare_organization_data_for_save(payload)
        assert "address" in payload
        assert "contactPoints" in payload


class TestFormatOrganizationForApi:
    def test_nests_address_columns(self):
        row = {
            "id": uuid.uuid4(),
            "name": "Nested",
            "address_country": "FR",
            "address_locality": "Caen",
            "postal_code": "14000",
            "street_address": "2 place Saint-Pierre",
            "contact_points": None,
        }

        formatted = format_organization_for_api(row)

        assert formatted["address"] == {
            "addressCountry": "FR",
            "addressLocality": "Caen",
            "postalCode": "14000",
            "streetAddress": "2 place Saint-Pierre",
        }
        assert "postal_code" not in formatted
        assert formatted["name"] == "Nested"
        assert formatted["id"] == row["id"]
        assert formatted["contactPoints"] is None

    def test_round_trip_restores_address(self):
        payload = organization_payload(name="Round Trip", postal_code="14200", locality="Herouville")

        organization = prepare_organization_data_for_save(payload)["organization"]
        formatted = format_organization_for_api(organization)

        assert formatted["address"] == payload["address"]
        assert formatted["name"] == payload["name"]
        assert formatted["url"] == payload["url"]

    def test_round_trip_from_validated_payload(self):
        payload = OrganizationPayload.model_validate(organization_payload(name="Validated"))
        api_data = payload.model_dump(by_alias=True, exclude_unset=True)

        organization = prepare_organization_data_for_save(api_data)["organization"]

        assert format_organization_for_api(organization)["address"] == payload.address.model_dump(
            by_alias=True
        )


class TestComputeDeletionSet:
    def test_keeps_referenced_ignores_unknown(self):
        assert compute_deletion_set(
            ["a", "b", "c"], [{"identifier": "a"}, {"identifier": "d"}]
        ) == ["b", "c"]

    def test_empty_snapshot_deletes_nothing(self):
        assert compute_deletion_set([], [{"identifier": "a"}, {"email": "new@x.com"}]) == []

    def test_empty_payload_deletes_everything(self):
        assert compute_deletion_set(["a", "b"], []) == ["a", "b"]

    def test_entries_without_identifier_reference_nothing(self):
        assert compute_deletion_set(["a"], [{"identifier": None}, {"contactType": "fax"}]) == ["a"]


def test_contact_point_values_maps_columns_and_drops_identifier():
    values = contact_point_values({
        "identifier": uuid.uuid4(),
        "email": "jobs@x.com",
        "telephone": "0231000000",
        "name": "HR",
        "contactType": "recruitment",
    })
    assert values == {
        "email": "jobs@x.com",
        "telephone": "0231000000",
        "name": "HR",
        "contact_type": "recruitment",
    }
