"""Resource ownership lookup used to derive a request's recipient tenant."""

from enum import Enum
from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from ..exceptions import NotFoundError
from ..models.opportunity import Opportunity
from ..models.talent import Talent
from .status import RequestKind


class SubjectType(str, Enum):
    TALENT = "talent"
    OPPORTUNITY = "opportunity"


# The subject of each request kind
SUBJECT_OF_KIND = {
    RequestKind.TALENT: SubjectType.TALENT,
    RequestKind.OPPORTUNITY: SubjectType.OPPORTUNITY,
}


class OwnershipLookup(Protocol):
    """Answers "which tenant owns this resource right now"."""

    def owner_tenant_of(self, subject_type: SubjectType, subject_id: UUID) -> UUID:
        """Return the owning tenant id.

        Raises:
            NotFoundError: If the resource does not exist
        """
        ...


class SqlResourceOwnership:
    """OwnershipLookup backed by the talent and opportunity tables."""

    _MODELS = {
        SubjectType.TALENT: Talent,
        SubjectType.OPPORTUNITY: Opportunity,
    }

    def __init__(self, db: Session):
        self.db = db

    def owner_tenant_of(self, subject_type: SubjectType, subject_id: UUID) -> UUID:
        model = self._MODELS[subject_type]
        row = self.db.query(model.tenant_id).filter(model.id == subject_id).first()
        if row is None:
            raise NotFoundError(f"{subject_type.value.capitalize()} not found")
        return row.tenant_id
