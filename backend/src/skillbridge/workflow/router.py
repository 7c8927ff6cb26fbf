"""Request workflow endpoints.

Sender side:
- POST  /tenants/{tenant_id}/talent-requests
- POST  /tenants/{tenant_id}/opportunity-requests      (provider tenants only)
- GET   /tenants/{tenant_id}/requests/sent/{request_id}
- PATCH /tenants/{tenant_id}/requests/sent/{request_id}
- POST  /tenants/{tenant_id}/requests/sent/{request_id}/withdraw

Recipient side:
- GET   /tenants/{tenant_id}/requests/inbox/{request_id}
- POST  /tenants/{tenant_id}/requests/inbox/{request_id}/respond

The tenant in the path must be the caller's own tenant (access pipeline);
whether that tenant is the sender or the recipient of a given request is
decided by the workflow engine.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..auth.dependencies import require
from ..auth.identity import Principal
from ..auth.pipeline import PROVIDER_SENDER, TENANT_MEMBER
from ..database import get_db
from .engine import RequestWorkflow
from .schemas import (
    OpportunityRequestCreate,
    RequestUpdate,
    RequestView,
    RespondRequest,
    TalentRequestCreate,
)
from .status import RequestKind
from .views import build_view


router = APIRouter(prefix="/tenants/{tenant_id}", tags=["Requests"])


@router.post(
    "/talent-requests",
    response_model=RequestView,
    status_code=status.HTTP_201_CREATED,
    summary="Send a talent request",
)
def create_talent_request(
    tenant_id: UUID,
    data: TalentRequestCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestView:
    """Ask the talent's owner about a talent.

    The recipient tenant is always the talent's current owner.
    """
    record = RequestWorkflow(db, request=request).create(
        kind=RequestKind.TALENT,
        from_tenant_id=principal.tenant_id,
        from_user_id=principal.user_id,
        subject_id=data.talent_id,
        title=data.title,
        message_text=data.message_text,
    )
    return build_view(db, record, principal.tenant_id)


@router.post(
    "/opportunity-requests",
    response_model=RequestView,
    status_code=status.HTTP_201_CREATED,
    summary="Offer a talent for an opportunity (provider tenants only)",
)
def create_opportunity_request(
    tenant_id: UUID,
    data: OpportunityRequestCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(PROVIDER_SENDER)),
) -> RequestView:
    record = RequestWorkflow(db, request=request).create(
        kind=RequestKind.OPPORTUNITY,
        from_tenant_id=principal.tenant_id,
        from_user_id=principal.user_id,
        subject_id=data.opportunity_id,
        title=data.title,
        message_text=data.message_text,
        offered_talent_id=data.offered_talent_id,
    )
    return build_view(db, record, principal.tenant_id)


@router.get("/requests/sent/{request_id}", response_model=RequestView, summary="Sent request detail")
def get_sent_request(
    tenant_id: UUID,
    request_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestView:
    record = RequestWorkflow(db).get_sent(request_id, principal.tenant_id)
    return build_view(db, record, principal.tenant_id)


@router.patch("/requests/sent/{request_id}", response_model=RequestView, summary="Edit a pending request")
def edit_sent_request(
    tenant_id: UUID,
    request_id: UUID,
    data: RequestUpdate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestView:
    record = RequestWorkflow(db, request=request).edit(
        request_id,
        principal.tenant_id,
        title=data.title,
        message_text=data.message_text,
        actor_id=principal.user_id,
    )
    return build_view(db, record, principal.tenant_id)


@router.post(
    "/requests/sent/{request_id}/withdraw",
    response_model=RequestView,
    summary="Withdraw a pending request",
)
def withdraw_sent_request(
    tenant_id: UUID,
    request_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestView:
    record = RequestWorkflow(db, request=request).withdraw(
        request_id, principal.tenant_id, actor_id=principal.user_id
    )
    return build_view(db, record, principal.tenant_id)


@router.get("/requests/inbox/{request_id}", response_model=RequestView, summary="Received request detail")
def get_inbox_request(
    tenant_id: UUID,
    request_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestView:
    """Received request; sender contact is included once accepted."""
    record = RequestWorkflow(db).get_inbox(request_id, principal.tenant_id)
    return build_view(db, record, principal.tenant_id)


@router.post(
    "/requests/inbox/{request_id}/respond",
    response_model=RequestView,
    summary="Accept or decline a received request",
)
def respond_to_request(
    tenant_id: UUID,
    request_id: UUID,
    data: RespondRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestView:
    record = RequestWorkflow(db, request=request).respond(
        request_id,
        principal.tenant_id,
        decision=data.decision,
        response_message=data.message,
        actor_id=principal.user_id,
    )
    return build_view(db, record, principal.tenant_id)
