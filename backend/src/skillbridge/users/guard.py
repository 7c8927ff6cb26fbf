"""Role-hierarchy guard for user mutations.

Runs after the access pipeline has decided that the caller may work on the
tenant's user list at all, and decides whether the caller may act on one
specific target user in one specific way. Rules, in order:

1. A manager may never view, edit or delete an admin   (ManagerCannotTouchAdmin)
2. Nobody may delete their own account                  (CannotDeleteSelf)
3. Removing an admin (demotion, deactivation, deletion) is admin-only
                                                        (OnlyAdminMayDemote)
   and is refused while the tenant has a single active admin
                                                        (LastAdminProtected)

The admin count is read with SELECT ... FOR UPDATE inside the caller's
transaction so that two concurrent demotions cannot both see "2 admins".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..auth.identity import Principal
from ..auth.pipeline import Decision
from ..auth.roles import Role
from ..models.user import User
from ..observability.logging_config import get_logger
from ..observability.metrics import user_guard_denials_total

logger = get_logger(__name__)


class GuardReason(str, Enum):
    """Business-rule reasons for refusing a user mutation."""
    MANAGER_CANNOT_TOUCH_ADMIN = "ManagerCannotTouchAdmin"
    CANNOT_DELETE_SELF = "CannotDeleteSelf"
    ONLY_ADMIN_MAY_DEMOTE = "OnlyAdminMayDemote"
    LAST_ADMIN_PROTECTED = "LastAdminProtected"


GUARD_MESSAGES = {
    GuardReason.MANAGER_CANNOT_TOUCH_ADMIN: "Managers cannot view or change admin users",
    GuardReason.CANNOT_DELETE_SELF: "You cannot delete your own account",
    GuardReason.ONLY_ADMIN_MAY_DEMOTE: "Only an admin may demote or remove an admin",
    GuardReason.LAST_ADMIN_PROTECTED: "The last admin of a tenant cannot be demoted or removed",
}


class MutationKind(str, Enum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class UserChange:
    """A proposed operation on a target user.

    Attributes:
        kind: view, update or delete
        new_role: Role the update would assign (None = unchanged)
        deactivate: The update would set is_active to False
    """
    kind: MutationKind
    new_role: Optional[Role] = None
    deactivate: bool = False

    def removes_admin(self, target: User) -> bool:
        """True if applying this change leaves ``target`` no longer an active admin."""
        if target.role != Role.ADMIN.value or not target.is_active:
            return False
        if self.kind == MutationKind.DELETE:
            return True
        if self.kind == MutationKind.UPDATE:
            demoted = self.new_role is not None and self.new_role != Role.ADMIN
            return demoted or self.deactivate
        return False


class UserMutationDenied(Exception):
    """A business invariant refused the user mutation.

    Distinct from auth.pipeline.AccessDenied: this is the business_rule layer.
    """

    layer = "business_rule"

    def __init__(self, reason: GuardReason):
        self.reason = reason
        self.message = GUARD_MESSAGES[reason]
        super().__init__(self.message)


def count_active_admins(db: Session, tenant_id: UUID) -> int:
    """Count the tenant's active admins, locking those rows until commit."""
    rows = (
        db.query(User.id)
        .filter(
            User.tenant_id == tenant_id,
            User.role == Role.ADMIN.value,
            User.is_active.is_(True),
        )
        .with_for_update()
        .all()
    )
    return len(rows)


def can_mutate_user(db: Session, actor: Principal, target: User, change: UserChange) -> Decision:
    """Decide whether ``actor`` may apply ``change`` to ``target``.

    Returns:
        Decision: allow, or deny with a GuardReason
    """
    if actor.role == Role.MANAGER and target.role == Role.ADMIN.value:
        return Decision.deny(GuardReason.MANAGER_CANNOT_TOUCH_ADMIN)

    if change.kind == MutationKind.DELETE and target.id == actor.user_id:
        return Decision.deny(GuardReason.CANNOT_DELETE_SELF)

    if change.removes_admin(target):
        if actor.role != Role.ADMIN:
            return Decision.deny(GuardReason.ONLY_ADMIN_MAY_DEMOTE)
        if count_active_admins(db, target.tenant_id) <= 1:
            return Decision.deny(GuardReason.LAST_ADMIN_PROTECTED)

    return Decision.allow()


def enforce_user_mutation(db: Session, actor: Principal, target: User, change: UserChange) -> None:
    """Raise UserMutationDenied unless ``can_mutate_user`` allows the change."""
    decision = can_mutate_user(db, actor, target, change)
    if decision.allowed:
        return

    user_guard_denials_total.labels(reason=decision.reason.value).inc()
    logger.warning(
        f"User mutation denied: {decision.reason.value}",
        extra={
            "layer": UserMutationDenied.layer,
            "reason": decision.reason.value,
            "tenant_id": actor.tenant_id,
            "user_id": actor.user_id,
        },
    )
    raise UserMutationDenied(decision.reason)
