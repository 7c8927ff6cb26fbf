"""Request workflow engine.

Owns every state change of a TenantRequest:

    create    (none)  → pending    sender tenant
    edit      pending → pending    sender tenant
    withdraw  pending → expired    sender tenant
    respond   pending → accepted | declined   recipient tenant

Each transition out of pending is a single conditional UPDATE
(``WHERE id = :id AND status = 'pending'``); when it matches no row the
operation fails and nothing is written, so two concurrent responses can
never both succeed. The recipient tenant is resolved from the subject's
current owner at creation time and frozen on the record.
"""

from typing import Optional
from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..exceptions import (
    AlreadyProcessedError,
    DomainError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from ..models.base import utcnow
from ..models.tenant_request import TenantRequest
from ..observability.logging_config import get_logger
from ..observability.metrics import request_transition_failures_total, request_transitions_total
from .ownership import OwnershipLookup, SqlResourceOwnership, SubjectType, SUBJECT_OF_KIND
from .status import RequestEvent, RequestKind, RequestStatus, ResponseDecision, next_status

logger = get_logger(__name__)

TITLE_MIN_LENGTH = 2
TITLE_MAX_LENGTH = 120
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 4000
RESPONSE_MAX_LENGTH = 2000

_AUDIT_ACTIONS = {
    RequestEvent.CREATE: "REQUEST_CREATED",
    RequestEvent.EDIT: "REQUEST_UPDATED",
    RequestEvent.WITHDRAW: "REQUEST_WITHDRAWN",
    RequestEvent.ACCEPT: "REQUEST_ACCEPTED",
    RequestEvent.DECLINE: "REQUEST_DECLINED",
}


def normalize_title(title: Optional[str]) -> Optional[str]:
    """Trim a title and check its length; None stays None.

    Raises:
        InvalidInputError: Trimmed title is outside 2-120 characters
    """
    if title is None:
        return None
    title = title.strip()
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise InvalidInputError(
            f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
        )
    return title


def normalize_message(message_text: Optional[str]) -> str:
    """Trim a message and check its length.

    Raises:
        InvalidInputError: Trimmed message is outside 10-4000 characters
    """
    message_text = (message_text or "").strip()
    if not MESSAGE_MIN_LENGTH <= len(message_text) <= MESSAGE_MAX_LENGTH:
        raise InvalidInputError(
            f"Message must be between {MESSAGE_MIN_LENGTH} and {MESSAGE_MAX_LENGTH} characters"
        )
    return message_text


def normalize_response(message: Optional[str]) -> Optional[str]:
    """Trim a response message; blank becomes None.

    Raises:
        InvalidInputError: Trimmed message is longer than 2000 characters
    """
    if message is None:
        return None
    message = message.strip()
    if len(message) > RESPONSE_MAX_LENGTH:
        raise InvalidInputError(f"Response message must be at most {RESPONSE_MAX_LENGTH} characters")
    return message or None


class RequestWorkflow:
    """State machine for cross-tenant requests.

    Methods commit on success. On failure they raise a DomainError subclass
    and leave the database untouched.
    """

    def __init__(
        self,
        db: Session,
        ownership: Optional[OwnershipLookup] = None,
        request: Optional[Request] = None,
    ):
        self.db = db
        self.ownership = ownership or SqlResourceOwnership(db)
        self.request = request

    def create(
        self,
        kind: RequestKind,
        from_tenant_id: UUID,
        from_user_id: UUID,
        subject_id: UUID,
        title: Optional[str],
        message_text: str,
        offered_talent_id: Optional[UUID] = None,
    ) -> TenantRequest:
        """Create a pending request addressed to the subject's owner.

        Raises:
            NotFoundError: Subject (or offered talent) does not exist
            InvalidInputError: Length rules violated, request to own tenant,
                or offered talent not owned by the sender
        """
        try:
            to_tenant_id = self.ownership.owner_tenant_of(SUBJECT_OF_KIND[kind], subject_id)

            if kind == RequestKind.OPPORTUNITY:
                if offered_talent_id is None:
                    raise InvalidInputError("An opportunity request must offer one of your talents")
                talent_owner = self.ownership.owner_tenant_of(SubjectType.TALENT, offered_talent_id)
                if talent_owner != from_tenant_id:
                    raise InvalidInputError("The offered talent must belong to your tenant")
            elif offered_talent_id is not None:
                raise InvalidInputError("Only opportunity requests can offer a talent")

            title = normalize_title(title)
            message_text = normalize_message(message_text)

            if to_tenant_id == from_tenant_id:
                raise InvalidInputError("A request cannot be sent to your own tenant")
        except DomainError as e:
            self._failed(RequestEvent.CREATE, e)
            raise

        record = TenantRequest(
            kind=kind.value,
            from_tenant_id=from_tenant_id,
            from_user_id=from_user_id,
            to_tenant_id=to_tenant_id,
            subject_id=subject_id,
            offered_talent_id=offered_talent_id,
            title=title,
            message_text=message_text,
            status=RequestStatus.PENDING.value,
        )
        self.db.add(record)
        self.db.flush()
        self._audit(record, RequestEvent.CREATE, from_tenant_id, from_user_id)
        self.db.commit()
        self.db.refresh(record)

        self._succeeded(record, RequestEvent.CREATE)
        return record

    def edit(
        self,
        request_id: UUID,
        acting_tenant_id: UUID,
        title: Optional[str] = None,
        message_text: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> TenantRequest:
        """Change title and/or message of a pending request.

        Raises:
            NotFoundError: Request does not exist
            ForbiddenError: Acting tenant is not the sender
            InvalidStateError: Request is no longer pending
            InvalidInputError: No field supplied, or length rules violated
        """
        try:
            record = self._load_as_sender(request_id, acting_tenant_id)
            self._resolve_transition(record, RequestEvent.EDIT)

            if title is None and message_text is None:
                raise InvalidInputError("Nothing to update: supply a title or a message")

            values = {"updated_at": utcnow()}
            if title is not None:
                values["title"] = normalize_title(title)
            if message_text is not None:
                values["message_text"] = normalize_message(message_text)

            self._apply_if_unchanged(record, TenantRequest.from_tenant_id, acting_tenant_id, values, RequestEvent.EDIT)
        except DomainError as e:
            self._failed(RequestEvent.EDIT, e)
            raise

        return self._commit_transition(record, RequestEvent.EDIT, acting_tenant_id, actor_id)

    def withdraw(
        self,
        request_id: UUID,
        acting_tenant_id: UUID,
        actor_id: Optional[UUID] = None,
    ) -> TenantRequest:
        """Withdraw a pending request (pending → expired).

        A second withdrawal fails with InvalidStateError.

        Raises:
            NotFoundError: Request does not exist
            ForbiddenError: Acting tenant is not the sender
            InvalidStateError: Request is no longer pending
        """
        try:
            record = self._load_as_sender(request_id, acting_tenant_id)
            target = self._resolve_transition(record, RequestEvent.WITHDRAW)
            values = {"status": target.value, "updated_at": utcnow()}
            self._apply_if_unchanged(record, TenantRequest.from_tenant_id, acting_tenant_id, values, RequestEvent.WITHDRAW)
        except DomainError as e:
            self._failed(RequestEvent.WITHDRAW, e)
            raise

        return self._commit_transition(record, RequestEvent.WITHDRAW, acting_tenant_id, actor_id)

    def respond(
        self,
        request_id: UUID,
        acting_tenant_id: UUID,
        decision: ResponseDecision,
        response_message: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> TenantRequest:
        """Accept or decline a pending request as its recipient.

        Raises:
            NotFoundError: Request does not exist
            ForbiddenError: Acting tenant is not the recipient
            AlreadyProcessedError: Request is no longer pending
            InvalidInputError: Response message too long
        """
        decision = ResponseDecision(decision)
        event = decision.event
        try:
            record = self._load_as_recipient(request_id, acting_tenant_id)
            target = self._resolve_transition(record, event)
            now = utcnow()
            values = {
                "status": target.value,
                "response_message": normalize_response(response_message),
                "responded_at": now,
                "updated_at": now,
            }
            self._apply_if_unchanged(record, TenantRequest.to_tenant_id, acting_tenant_id, values, event)
        except DomainError as e:
            self._failed(event, e)
            raise

        return self._commit_transition(record, event, acting_tenant_id, actor_id)

    def get_sent(self, request_id: UUID, tenant_id: UUID) -> TenantRequest:
        """Load a request for its sender tenant (NotFound / Forbidden otherwise)."""
        return self._load_as_sender(request_id, tenant_id)

    def get_inbox(self, request_id: UUID, tenant_id: UUID) -> TenantRequest:
        """Load a request for its recipient tenant (NotFound / Forbidden otherwise)."""
        return self._load_as_recipient(request_id, tenant_id)

    def _load(self, request_id: UUID) -> TenantRequest:
        record = self.db.get(TenantRequest, request_id)
        if record is None:
            raise NotFoundError("Request not found")
        return record

    def _load_as_sender(self, request_id: UUID, tenant_id: UUID) -> TenantRequest:
        record = self._load(request_id)
        if record.from_tenant_id != tenant_id:
            raise ForbiddenError("Only the sending tenant may access this request")
        return record

    def _load_as_recipient(self, request_id: UUID, tenant_id: UUID) -> TenantRequest:
        record = self._load(request_id)
        if record.to_tenant_id != tenant_id:
            raise ForbiddenError("Only the receiving tenant may access this request")
        return record

    def _resolve_transition(self, record: TenantRequest, event: RequestEvent) -> RequestStatus:
        """Status the record moves to on ``event``, from the transition table."""
        target = next_status(RequestStatus(record.status), event)
        if target is None:
            raise self._state_error(event, record.status)
        return target

    def _state_error(self, event: RequestEvent, status: str) -> InvalidStateError:
        if event in (RequestEvent.ACCEPT, RequestEvent.DECLINE):
            return AlreadyProcessedError("This request has already been processed")
        return InvalidStateError(f"Only pending requests can be changed (status: {status})")

    def _apply_if_unchanged(self, record, party_column, acting_tenant_id, values, event) -> None:
        """Write ``values`` only if the row still has the status the transition was resolved from."""
        affected = (
            self.db.query(TenantRequest)
            .filter(
                TenantRequest.id == record.id,
                party_column == acting_tenant_id,
                TenantRequest.status == record.status,
            )
            .update(values, synchronize_session=False)
        )
        if affected != 1:
            self.db.rollback()
            raise self._state_error(event, "changed concurrently")

    def _commit_transition(self, record, event, acting_tenant_id, actor_id) -> TenantRequest:
        self._audit(record, event, acting_tenant_id, actor_id)
        self.db.commit()
        self.db.refresh(record)
        self._succeeded(record, event)
        return record

    def _audit(self, record, event, tenant_id, actor_id) -> None:
        log_from_request(
            db=self.db,
            request=self.request,
            tenant_id=tenant_id,
            action=_AUDIT_ACTIONS[event],
            actor_id=actor_id,
            entity_type="tenant_request",
            entity_id=record.id,
            metadata={"kind": record.kind},
        )

    def _succeeded(self, record: TenantRequest, event: RequestEvent) -> None:
        request_transitions_total.labels(kind=record.kind, event=event.value).inc()
        logger.info(
            f"Request {event.value}: {record.status}",
            extra={"request_pk": record.id, "tenant_id": record.from_tenant_id},
        )

    def _failed(self, event: RequestEvent, error: DomainError) -> None:
        request_transition_failures_total.labels(event=event.value, error=error.code).inc()
        logger.warning(
            f"Request {event.value} rejected: {error.message}",
            extra={"layer": error.layer, "reason": error.code},
        )
