"""Security tests for tenant escape/isolation attacks

Tests cover:
- Tenant id switching in the request path
- Admin role never bypassing tenant scope
- Request ids belonging to other tenants
- Recipient tenant never taken from the request body
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from fixtures.multi_tenant import auth_headers
from skillbridge.models.tenant_request import TenantRequest


pytestmark = pytest.mark.security

MESSAGE = "Checking whether this engineer is available."


@pytest.fixture
def pending_request(client: TestClient, consumer_member, consumer_tenant, provider_talent) -> str:
    response = client.post(
        f"/tenants/{consumer_tenant.id}/talent-requests",
        json={"talent_id": str(provider_talent.id), "message_text": MESSAGE},
        headers=auth_headers(consumer_member),
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestTenantIdSwitching:
    """Path tenant id must equal the caller's tenant"""

    @pytest.mark.parametrize("suffix", [
        "/users",
        "/requests/inbox",
        "/requests/sent",
        "/audit",
    ])
    def test_admin_cannot_read_other_tenant(self, client: TestClient, provider_admin, consumer_tenant, suffix):
        response = client.get(f"/tenants/{consumer_tenant.id}{suffix}", headers=auth_headers(provider_admin))

        assert response.status_code == 403
        body = response.json()
        assert body["layer"] == "authorization"
        assert body["reason"] == "WrongTenant"

    def test_cannot_create_user_in_other_tenant(self, client: TestClient, consumer_admin, provider_tenant):
        response = client.post(
            f"/tenants/{provider_tenant.id}/users",
            json={"email": "mole@beta-corp.example.com", "name": "Mole", "role": "admin", "password": "SecureP@ss123"},
            headers=auth_headers(consumer_admin),
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "WrongTenant"

    def test_cannot_send_as_other_tenant(self, client: TestClient, db_session: Session, consumer_member, other_provider_tenant, provider_talent):
        response = client.post(
            f"/tenants/{other_provider_tenant.id}/talent-requests",
            json={"talent_id": str(provider_talent.id), "message_text": MESSAGE},
            headers=auth_headers(consumer_member),
        )

        assert response.status_code == 403
        assert db_session.query(TenantRequest).count() == 0


class TestRequestIdGuessing:
    """A known request id does not grant access to it"""

    def test_third_tenant_cannot_read_inbox_item(self, client: TestClient, pending_request, other_admin, other_provider_tenant):
        response = client.get(
            f"/tenants/{other_provider_tenant.id}/requests/inbox/{pending_request}",
            headers=auth_headers(other_admin),
        )

        assert response.status_code == 403
        assert response.json()["layer"] == "workflow"

    def test_third_tenant_cannot_respond(self, client: TestClient, db_session: Session, pending_request, other_admin, other_provider_tenant):
        response = client.post(
            f"/tenants/{other_provider_tenant.id}/requests/inbox/{pending_request}/respond",
            json={"decision": "accept"},
            headers=auth_headers(other_admin),
        )

        assert response.status_code == 403
        db_session.expire_all()
        assert db_session.query(TenantRequest).one().status == "pending"

    def test_recipient_cannot_edit_via_sent_path(self, client: TestClient, pending_request, provider_admin, provider_tenant):
        response = client.patch(
            f"/tenants/{provider_tenant.id}/requests/sent/{pending_request}",
            json={"title": "Rewritten"},
            headers=auth_headers(provider_admin),
        )

        assert response.status_code == 403

    def test_listings_do_not_leak(self, client: TestClient, pending_request, other_admin, other_provider_tenant):
        for box in ("inbox", "sent"):
            response = client.get(
                f"/tenants/{other_provider_tenant.id}/requests/{box}",
                headers=auth_headers(other_admin),
            )
            assert response.json()["total"] == 0


class TestRecipientDerivation:

    def test_body_cannot_choose_recipient(
        self, client: TestClient, db_session: Session, consumer_member, consumer_tenant, provider_talent,
        provider_tenant, other_provider_tenant,
    ):
        response = client.post(
            f"/tenants/{consumer_tenant.id}/talent-requests",
            json={
                "talent_id": str(provider_talent.id),
                "message_text": MESSAGE,
                "to_tenant_id": str(other_provider_tenant.id),
            },
            headers=auth_headers(consumer_member),
        )

        assert response.status_code == 201
        assert response.json()["to_tenant_id"] == str(provider_tenant.id)
