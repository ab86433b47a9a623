"""Edge case and error handling tests."""
import pytest
from fastapi import status
from tests.conftest import client, make_policy, ADMIN_HEADERS, POLICIES_URL
from app.services.cache import POLICY_CACHE


class TestEdgeCases:
    """Test edge cases and error handling."""

    def test_invalid_json_payload(self):
        """Test handling of invalid JSON payload."""
        response = client.post(
            POLICIES_URL,
            content="invalid json",
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_missing_required_fields(self):
        """Test creating a policy without a policy number."""
        payload = make_policy()
        del payload["policy_number"]
        response = client.post(POLICIES_URL, json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_negative_premium_rejected(self):
        response = client.post(POLICIES_URL, json=make_policy(premium_amount="-5.00"))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_end_before_start_rejected(self):
        response = client.post(POLICIES_URL, json=make_policy(start_date="2024-01-01", end_date="2023-01-01"))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_unknown_status_code_on_create(self):
        response = client.post(POLICIES_URL, json=make_policy(status="PENDING"))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_full_enum_names_accepted_on_create(self):
        response = client.post(POLICIES_URL, json=make_policy(status="Expired", policy_type="liability"))
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["status"] == "EXP"
        assert response.json()["policy_type"] == "LIAB"

    def test_duplicate_policy_number(self):
        """Test creating two policies with the same number."""
        response1 = client.post(POLICIES_URL, json=make_policy(policy_number="DUP-1"))
        assert response1.status_code == status.HTTP_201_CREATED

        response2 = client.post(POLICIES_URL, json=make_policy(policy_number="DUP-1"))
        assert response2.status_code == status.HTTP_409_CONFLICT
        assert response2.json()["code"] == "CONFLICT"

    def test_nonexistent_policy_id(self):
        response = client.get(f"{POLICIES_URL}/99999")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert "not found" in body["message"].lower()
        assert body["status"] == 404
        assert body["error"] == "Not Found"
        assert "timestamp" in body

    def test_nonexistent_policy_number(self):
        response = client.get(f"{POLICIES_URL}/policy-number/NOPE-1")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize("policy_id", [0, -1, 2**63, 2**70])
    def test_out_of_range_id_is_not_found(self, policy_id):
        """Ids the store cannot hold are missing records, not server errors."""
        url = f"{POLICIES_URL}/{policy_id}"
        assert client.get(url).status_code == status.HTTP_404_NOT_FOUND
        assert client.put(url, json={"status": "EXP"}).status_code == status.HTTP_404_NOT_FOUND
        response = client.delete(url)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "NOT_FOUND"

    def test_update_nonexistent_policy(self):
        response = client.put(f"{POLICIES_URL}/99999", json={"status": "EXP"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_nonexistent_policy(self):
        response = client.delete(f"{POLICIES_URL}/99999")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_policy_number_rejected(self):
        policy_id = client.post(POLICIES_URL, json=make_policy(policy_number="KEEP-1")).json()["id"]
        response = client.put(f"{POLICIES_URL}/{policy_id}", json={"policy_number": "OTHER-1"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_ARGUMENT"
        assert client.get(f"{POLICIES_URL}/{policy_id}").json()["policy_number"] == "KEEP-1"

    @pytest.mark.parametrize("params", [
        {"status": "PENDING"},
        {"policy_type": "TRUCK"},
        {"start_date": "01/02/2023"},
        {"min_premium": "lots"},
        {"min_premium": "-10"},
        {"start_date": "2024-01-01", "end_date": "2023-01-01"},
        {"min_premium": "500", "max_premium": "100"},
    ])
    def test_invalid_filters_are_bad_requests(self, params):
        """Malformed filters fail before any cache or store access."""
        response = client.get(f"{POLICIES_URL}/filter", params=params)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["code"] == "INVALID_ARGUMENT"
        assert body["details"]["errors"]
        assert len(POLICY_CACHE.filtered) == 0

    def test_blank_filters_are_ignored(self):
        client.post(POLICIES_URL, json=make_policy(policy_number="BLANK-1"))
        response = client.get(f"{POLICIES_URL}/filter", params={"vehicle_make": "", "status": ""})
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_filter_with_no_matches(self):
        client.post(POLICIES_URL, json=make_policy(policy_number="NM-1"))
        response = client.get(f"{POLICIES_URL}/filter", params={"vehicle_make": "Lada"})
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("params", [
        {"page": -1}, {"size": 0}, {"size": 500}, {"page": 2**62, "size": 100}, {"page": 2**70},
    ])
    def test_invalid_paging(self, params):
        response = client.get(POLICIES_URL, params=params)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_ARGUMENT"

    def test_empty_batch_request(self):
        """Test batch request with empty list."""
        response = client.post(f"{POLICIES_URL}/batch", json=[])
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == []

    def test_batch_with_one_invalid_item(self):
        """A single invalid item rejects the whole batch."""
        batch = [make_policy(policy_number="OK-1"), make_policy(policy_number="BAD-1", status="NOPE")]
        response = client.post(f"{POLICIES_URL}/batch", json=batch)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert client.get(f"{POLICIES_URL}/policy-number/OK-1").status_code == 404

    def test_very_long_policy_number(self):
        """Test handling of very long policy number."""
        response = client.post(POLICIES_URL, json=make_policy(policy_number="P" * 500))
        assert response.status_code in [201, 400, 422]

    def test_unauthorized_access_to_cache_endpoints(self):
        """Test accessing cache administration without API key."""
        response = client.get("/cache/stats")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_api_key(self):
        """Test accessing cache administration with invalid API key."""
        response = client.delete(
            "/cache",
            headers={"Authorization": "Bearer invalid_key_12345"}
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_malformed_authorization_header(self):
        """Test with malformed authorization header."""
        response = client.delete(
            "/cache/filtered",
            headers={"Authorization": "InvalidFormat key"}
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_key_accepted(self):
        response = client.get("/cache/stats", headers=ADMIN_HEADERS)
        assert response.status_code == status.HTTP_200_OK

    def test_error_body_is_documented(self):
        """The OpenAPI document describes the structured error body."""
        schema = client.get("/openapi.json").json()
        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"][POLICIES_URL + "/{policy_id}"]["get"]["responses"]
        assert responses["404"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
