"""Integration tests for inbox and sent-box listings."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from skillbridge.directory.service import RequestDirectory
from skillbridge.models.tenant_request import TenantRequest


pytestmark = pytest.mark.integration

BASE_TIME = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def add_request(db: Session, sender_tenant, sender_user, recipient_tenant, subject, minutes: int,
                status: str = "pending", kind: str = "talent", title: str = None) -> TenantRequest:
    created = BASE_TIME + timedelta(minutes=minutes)
    record = TenantRequest(
        kind=kind,
        from_tenant_id=sender_tenant.id,
        from_user_id=sender_user.id,
        to_tenant_id=recipient_tenant.id,
        subject_id=subject.id,
        title=title or f"request {minutes}",
        message_text="Please let us know about availability.",
        status=status,
        created_at=created,
        updated_at=created,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def directory(db_session: Session) -> RequestDirectory:
    return RequestDirectory(db_session)


class TestInbox:

    def test_newest_first(self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent):
        for minutes in (0, 10, 5):
            add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, minutes)

        result = directory.list_inbox(provider_tenant.id)

        assert [item.title for item in result["items"]] == ["request 10", "request 5", "request 0"]
        assert result["total"] == 3
        assert result["pages"] == 1

    def test_only_own_inbox(
        self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent,
        other_provider_tenant, other_talent,
    ):
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 0)
        add_request(db_session, consumer_tenant, consumer_member, other_provider_tenant, other_talent, 1)

        result = directory.list_inbox(provider_tenant.id)

        assert result["total"] == 1
        assert all(item.to_tenant_id == provider_tenant.id for item in result["items"])

    def test_status_filter(self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent):
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 0, status="pending")
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 1, status="accepted")
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 2, status="declined")

        assert directory.list_inbox(provider_tenant.id, status_filter="accepted")["total"] == 1
        assert directory.list_inbox(provider_tenant.id, status_filter="all")["total"] == 3

    def test_unknown_status_filter_lists_everything(
        self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent
    ):
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 0, status="pending")
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 1, status="expired")

        assert directory.list_inbox(provider_tenant.id, status_filter="archived")["total"] == 2

    def test_sender_disclosed_only_when_accepted(
        self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent
    ):
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 0, status="pending")
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 1, status="accepted")

        accepted, pending = directory.list_inbox(provider_tenant.id)["items"]

        assert accepted.can_view_sender is True
        assert accepted.sender_email == consumer_member.email
        assert accepted.sender_name == consumer_member.name
        assert pending.can_view_sender is False
        assert pending.sender_email is None

    def test_subject_label(self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent):
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 0)

        (item,) = directory.list_inbox(provider_tenant.id)["items"]

        assert item.subject_label == provider_talent.name

    def test_pagination(self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent):
        for minutes in range(5):
            add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, minutes)

        page_two = directory.list_inbox(provider_tenant.id, page=2, per_page=2)

        assert [item.title for item in page_two["items"]] == ["request 2", "request 1"]
        assert page_two["pages"] == 3
        assert page_two["has_prev"] is True
        assert page_two["has_next"] is True

    def test_empty_inbox(self, directory, provider_tenant):
        result = directory.list_inbox(provider_tenant.id)

        assert result["items"] == []
        assert result["total"] == 0
        assert result["pages"] == 1
        assert result["has_next"] is False


class TestSent:

    def test_sender_never_sees_own_contact_flag(
        self, db_session, directory, consumer_tenant, consumer_member, provider_tenant, provider_talent
    ):
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 0, status="accepted")

        (item,) = directory.list_sent(consumer_tenant.id)["items"]

        assert item.status == "accepted"
        assert item.can_view_sender is False
        assert item.sender_email is None

    def test_kind_filter(
        self, db_session, directory, provider_tenant, provider_member, provider_talent, consumer_tenant,
        consumer_member, consumer_opportunity,
    ):
        add_request(db_session, provider_tenant, provider_member, consumer_tenant, consumer_opportunity, 0, kind="opportunity")
        add_request(db_session, consumer_tenant, consumer_member, provider_tenant, provider_talent, 1, kind="talent")

        result = directory.list_sent(provider_tenant.id, kind_filter="opportunity")

        assert result["total"] == 1
        assert result["items"][0].kind == "opportunity"
        assert result["items"][0].subject_label == consumer_opportunity.title
        assert directory.list_sent(provider_tenant.id, kind_filter="talent")["total"] == 0
