"""Builds disclosure-filtered views for one or many request records.

Sender contacts are only loaded for records the disclosure rule lets the
viewer see, and subject labels are batch-loaded per listing page.
"""

from typing import Dict, List, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from ..models.opportunity import Opportunity
from ..models.talent import Talent
from ..models.tenant_request import TenantRequest
from ..models.user import User
from .disclosure import disclose, may_disclose_sender
from .schemas import RequestView
from .status import RequestKind


def build_views(db: Session, records: Sequence[TenantRequest], viewer_tenant_id: UUID) -> List[RequestView]:
    sender_ids = {
        r.from_user_id for r in records
        if r.from_user_id is not None and may_disclose_sender(r, viewer_tenant_id)
    }
    senders: Dict[UUID, User] = {}
    if sender_ids:
        senders = {u.id: u for u in db.query(User).filter(User.id.in_(sender_ids)).all()}

    labels = _subject_labels(db, records)

    views = []
    for record in records:
        sender = senders.get(record.from_user_id)
        views.append(
            disclose(
                record,
                viewer_tenant_id,
                sender_email=sender.email if sender else None,
                sender_name=sender.name if sender else None,
                subject_label=labels.get(record.subject_id),
            )
        )
    return views


def build_view(db: Session, record: TenantRequest, viewer_tenant_id: UUID) -> RequestView:
    return build_views(db, [record], viewer_tenant_id)[0]


def _subject_labels(db: Session, records: Sequence[TenantRequest]) -> Dict[UUID, str]:
    talent_ids = {r.subject_id for r in records if r.kind == RequestKind.TALENT.value}
    opportunity_ids = {r.subject_id for r in records if r.kind == RequestKind.OPPORTUNITY.value}

    labels: Dict[UUID, str] = {}
    if talent_ids:
        for talent_id, name in db.query(Talent.id, Talent.name).filter(Talent.id.in_(talent_ids)):
            labels[talent_id] = name
    if opportunity_ids:
        for opportunity_id, title in db.query(Opportunity.id, Opportunity.title).filter(
            Opportunity.id.in_(opportunity_ids)
        ):
            labels[opportunity_id] = title
    return labels
