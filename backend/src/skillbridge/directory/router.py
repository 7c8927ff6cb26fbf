"""Inbox and sent-box listing endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth.dependencies import require
from ..auth.identity import Principal
from ..auth.pipeline import TENANT_MEMBER
from ..database import get_db
from ..workflow.schemas import RequestPage
from .service import RequestDirectory


router = APIRouter(prefix="/tenants/{tenant_id}/requests", tags=["Requests"])


@router.get("/inbox", response_model=RequestPage, summary="Requests received by the tenant")
def list_inbox(
    tenant_id: UUID,
    status: Optional[str] = Query("all", description="pending | accepted | declined | expired | all"),
    kind: Optional[str] = Query(None, description="talent | opportunity"),
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestPage:
    return RequestPage(
        **RequestDirectory(db).list_inbox(
            principal.tenant_id, status_filter=status, page=page, per_page=per_page, kind_filter=kind
        )
    )


@router.get("/sent", response_model=RequestPage, summary="Requests sent by the tenant")
def list_sent(
    tenant_id: UUID,
    status: Optional[str] = Query("all", description="pending | accepted | declined | expired | all"),
    kind: Optional[str] = Query(None, description="talent | opportunity"),
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_MEMBER)),
) -> RequestPage:
    return RequestPage(
        **RequestDirectory(db).list_sent(
            principal.tenant_id, status_filter=status, page=page, per_page=per_page, kind_filter=kind
        )
    )
