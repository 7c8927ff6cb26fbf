"""Integration tests for request workflow and listing endpoints."""

import pytest
from fastapi.testclient import TestClient

from fixtures.multi_tenant import auth_headers


pytestmark = pytest.mark.integration

MESSAGE = "We would like to discuss a six month engagement."


def send_talent_request(client, user, tenant, talent, title="Python engineer", message=MESSAGE):
    return client.post(
        f"/tenants/{tenant.id}/talent-requests",
        json={"talent_id": str(talent.id), "title": title, "message_text": message},
        headers=auth_headers(user),
    )


class TestTalentRequests:

    def test_any_role_can_send(self, client: TestClient, consumer_member, consumer_tenant, provider_talent, provider_tenant):
        response = send_talent_request(client, consumer_member, consumer_tenant, provider_talent)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["to_tenant_id"] == str(provider_tenant.id)
        assert data["subject_label"] == provider_talent.name
        assert data["can_view_sender"] is False

    def test_own_talent_is_invalid(self, client: TestClient, provider_member, provider_tenant, provider_talent):
        response = send_talent_request(client, provider_member, provider_tenant, provider_talent)

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "invalid_input"
        assert body["layer"] == "workflow"

    def test_short_message(self, client: TestClient, consumer_member, consumer_tenant, provider_talent):
        response = send_talent_request(client, consumer_member, consumer_tenant, provider_talent, message="hi")

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_input"


class TestOpportunityRequests:

    def test_provider_sends(self, client: TestClient, provider_member, provider_tenant, provider_talent, consumer_opportunity, consumer_tenant):
        response = client.post(
            f"/tenants/{provider_tenant.id}/opportunity-requests",
            json={
                "opportunity_id": str(consumer_opportunity.id),
                "offered_talent_id": str(provider_talent.id),
                "title": "Proposal",
                "message_text": MESSAGE,
            },
            headers=auth_headers(provider_member),
        )

        assert response.status_code == 201
        assert response.json()["to_tenant_id"] == str(consumer_tenant.id)
        assert response.json()["subject_label"] == consumer_opportunity.title

    def test_consumer_tenant_type_refused(
        self, client: TestClient, consumer_admin, consumer_tenant, consumer_opportunity, consumer_talent
    ):
        response = client.post(
            f"/tenants/{consumer_tenant.id}/opportunity-requests",
            json={
                "opportunity_id": str(consumer_opportunity.id),
                "offered_talent_id": str(consumer_talent.id),
                "message_text": MESSAGE,
            },
            headers=auth_headers(consumer_admin),
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "WrongTenantType"


class TestLifecycle:

    def test_accept_discloses_sender_to_recipient_only(
        self, client: TestClient, consumer_member, consumer_tenant, provider_talent, provider_member, provider_tenant
    ):
        request_id = send_talent_request(client, consumer_member, consumer_tenant, provider_talent).json()["id"]

        inbox_before = client.get(
            f"/tenants/{provider_tenant.id}/requests/inbox/{request_id}", headers=auth_headers(provider_member)
        ).json()
        assert inbox_before["sender_email"] is None

        response = client.post(
            f"/tenants/{provider_tenant.id}/requests/inbox/{request_id}/respond",
            json={"decision": "accept", "message": "Happy to talk."},
            headers=auth_headers(provider_member),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "accepted"
        assert data["response_message"] == "Happy to talk."
        assert data["can_view_sender"] is True
        assert data["sender_email"] == consumer_member.email
        assert data["sender_name"] == consumer_member.name

        sent = client.get(
            f"/tenants/{consumer_tenant.id}/requests/sent/{request_id}", headers=auth_headers(consumer_member)
        ).json()
        assert sent["status"] == "accepted"
        assert sent["can_view_sender"] is False
        assert sent["sender_email"] is None

    def test_second_response_is_already_processed(
        self, client: TestClient, consumer_member, consumer_tenant, provider_talent, provider_member, provider_tenant
    ):
        request_id = send_talent_request(client, consumer_member, consumer_tenant, provider_talent).json()["id"]
        url = f"/tenants/{provider_tenant.id}/requests/inbox/{request_id}/respond"

        client.post(url, json={"decision": "decline"}, headers=auth_headers(provider_member))
        response = client.post(url, json={"decision": "accept"}, headers=auth_headers(provider_member))

        assert response.status_code == 409
        assert response.json()["error"] == "already_processed"

    def test_edit_then_withdraw(self, client: TestClient, consumer_member, consumer_tenant, provider_talent):
        request_id = send_talent_request(client, consumer_member, consumer_tenant, provider_talent).json()["id"]
        url = f"/tenants/{consumer_tenant.id}/requests/sent/{request_id}"

        edited = client.patch(url, json={"title": "Senior Python engineer"}, headers=auth_headers(consumer_member))
        assert edited.status_code == 200
        assert edited.json()["title"] == "Senior Python engineer"

        withdrawn = client.post(f"{url}/withdraw", headers=auth_headers(consumer_member))
        assert withdrawn.status_code == 200
        assert withdrawn.json()["status"] == "expired"

        again = client.post(f"{url}/withdraw", headers=auth_headers(consumer_member))
        assert again.status_code == 409
        assert again.json()["error"] == "invalid_state"

    def test_empty_edit(self, client: TestClient, consumer_member, consumer_tenant, provider_talent):
        request_id = send_talent_request(client, consumer_member, consumer_tenant, provider_talent).json()["id"]

        response = client.patch(
            f"/tenants/{consumer_tenant.id}/requests/sent/{request_id}", json={}, headers=auth_headers(consumer_member)
        )

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_input"

    def test_sender_cannot_respond_via_own_inbox(
        self, client: TestClient, consumer_member, consumer_tenant, provider_talent
    ):
        request_id = send_talent_request(client, consumer_member, consumer_tenant, provider_talent).json()["id"]

        response = client.post(
            f"/tenants/{consumer_tenant.id}/requests/inbox/{request_id}/respond",
            json={"decision": "accept"},
            headers=auth_headers(consumer_member),
        )

        assert response.status_code == 403
        assert response.json()["layer"] == "workflow"

    def test_invalid_decision(self, client: TestClient, consumer_member, consumer_tenant, provider_talent, provider_member, provider_tenant):
        request_id = send_talent_request(client, consumer_member, consumer_tenant, provider_talent).json()["id"]

        response = client.post(
            f"/tenants/{provider_tenant.id}/requests/inbox/{request_id}/respond",
            json={"decision": "maybe"},
            headers=auth_headers(provider_member),
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestListings:

    def test_inbox_and_sent(
        self, client: TestClient, consumer_member, consumer_tenant, provider_talent, provider_member, provider_tenant
    ):
        send_talent_request(client, consumer_member, consumer_tenant, provider_talent)

        inbox = client.get(f"/tenants/{provider_tenant.id}/requests/inbox", headers=auth_headers(provider_member))
        sent = client.get(f"/tenants/{consumer_tenant.id}/requests/sent", headers=auth_headers(consumer_member))

        assert inbox.status_code == 200
        assert inbox.json()["total"] == 1
        assert sent.json()["total"] == 1
        assert inbox.json()["items"][0]["id"] == sent.json()["items"][0]["id"]

    def test_status_filter_and_unknown_value(
        self, client: TestClient, consumer_member, consumer_tenant, provider_talent, provider_member, provider_tenant
    ):
        send_talent_request(client, consumer_member, consumer_tenant, provider_talent)
        url = f"/tenants/{provider_tenant.id}/requests/inbox"

        accepted = client.get(url, params={"status": "accepted"}, headers=auth_headers(provider_member))
        anything = client.get(url, params={"status": "bogus"}, headers=auth_headers(provider_member))

        assert accepted.json()["total"] == 0
        assert anything.json()["total"] == 1

    def test_per_page_is_capped(self, client: TestClient, provider_member, provider_tenant):
        response = client.get(
            f"/tenants/{provider_tenant.id}/requests/inbox",
            params={"per_page": 1000},
            headers=auth_headers(provider_member),
        )

        assert response.status_code == 200
        assert response.json()["per_page"] == 100
