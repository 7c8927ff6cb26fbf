"""Tenant user management service.

All operations are scoped to the acting principal's tenant; a user id from a
different tenant is reported as not found. Every operation on one specific
user passes the role-hierarchy guard before anything is written, and every
successful mutation is audited in the same transaction.
"""

from typing import Optional, Tuple, List
from uuid import UUID

from fastapi import Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..auth.identity import Principal
from ..auth.password import hash_password, validate_password_strength
from ..auth.roles import Role
from ..directory.pagination import normalize_page, normalize_per_page, page_offset
from ..exceptions import ConflictError, InvalidInputError, NotFoundError
from ..models.user import User
from ..observability.logging_config import get_logger
from .guard import MutationKind, UserChange, UserMutationDenied, enforce_user_mutation
from .schemas import UserCreate, UserUpdate

logger = get_logger(__name__)


class UserService:
    """User administration within one tenant."""

    def __init__(self, db: Session, request: Optional[Request] = None):
        self.db = db
        self.request = request

    def list_users(
        self,
        actor: Principal,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Tuple[List[User], int, int, int]:
        """List the actor's tenant users, newest first.

        Returns:
            Tuple of (users, total, page, per_page)
        """
        page = normalize_page(page)
        per_page = normalize_per_page(per_page)

        query = self.db.query(User).filter(User.tenant_id == actor.tenant_id)
        if role:
            query = query.filter(User.role == Role(role).value)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))

        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id)
            .offset(page_offset(page, per_page))
            .limit(per_page)
            .all()
        )
        return users, total, page, per_page

    def get_user(self, actor: Principal, user_id: UUID) -> User:
        target = self._load_target(actor, user_id)
        self._enforce(actor, target, UserChange(MutationKind.VIEW))
        return target

    def create_user(self, actor: Principal, data: UserCreate) -> User:
        """Create a user in the actor's tenant.

        Adding admins is unrestricted for admins and managers alike.

        Raises:
            InvalidInputError: Password does not meet the strength policy
            ConflictError: Email already in use (in any tenant)
        """
        self._check_password(data.password)
        email = data.email.lower()
        self._check_email_free(email)

        user = User(
            tenant_id=actor.tenant_id,
            email=email,
            name=data.name,
            role=Role(data.role).value,
            password_hash=hash_password(data.password),
            is_active=True,
        )

        try:
            self.db.add(user)
            self.db.flush()
            self._audit(actor, "USER_CREATED", user, {"email": user.email, "role": user.role})
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with email {email} already exists")

        self.db.refresh(user)
        logger.info("User created", extra={"tenant_id": actor.tenant_id, "user_id": actor.user_id})
        return user

    def update_user(self, actor: Principal, user_id: UUID, data: UserUpdate) -> User:
        """Apply a partial update to a user.

        Raises:
            NotFoundError: User does not exist in the actor's tenant
            UserMutationDenied: Role-hierarchy guard refused the change
            InvalidInputError: New password does not meet the strength policy
            ConflictError: New email already in use
        """
        target = self._load_target(actor, user_id)
        new_role = Role(data.role) if data.role is not None else None
        change = UserChange(
            kind=MutationKind.UPDATE,
            new_role=new_role,
            deactivate=data.is_active is False,
        )
        self._enforce(actor, target, change)

        if data.password is not None:
            self._check_password(data.password)

        changes = {}
        if data.email is not None and data.email.lower() != target.email:
            email = data.email.lower()
            self._check_email_free(email)
            changes["email"] = {"old": target.email, "new": email}
            target.email = email
        if data.name is not None and data.name != target.name:
            changes["name"] = {"old": target.name, "new": data.name}
            target.name = data.name
        if data.password is not None:
            changes["password"] = "changed"
            target.password_hash = hash_password(data.password)

        old_role = target.role
        role_changed = new_role is not None and new_role.value != old_role
        if role_changed:
            target.role = new_role.value

        deactivated = data.is_active is False and target.is_active
        if data.is_active is not None and data.is_active != target.is_active:
            changes["is_active"] = {"old": target.is_active, "new": data.is_active}
            target.is_active = data.is_active

        try:
            self.db.flush()
            if changes:
                self._audit(actor, "USER_UPDATED", target, {"changes": changes})
            if role_changed:
                self._audit(actor, "USER_ROLE_CHANGED", target, {"old_role": old_role, "new_role": target.role})
            if deactivated:
                self._audit(actor, "USER_DEACTIVATED", target, {"email": target.email})
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("User update failed due to constraint violation")

        self.db.refresh(target)
        return target

    def delete_user(self, actor: Principal, user_id: UUID) -> None:
        """Delete a user.

        Raises:
            NotFoundError: User does not exist in the actor's tenant
            UserMutationDenied: Role-hierarchy guard refused the deletion
        """
        target = self._load_target(actor, user_id)
        self._enforce(actor, target, UserChange(MutationKind.DELETE))

        self._audit(actor, "USER_DELETED", target, {"email": target.email, "role": target.role})
        self.db.delete(target)
        self.db.commit()
        logger.info("User deleted", extra={"tenant_id": actor.tenant_id, "user_id": actor.user_id})

    def _load_target(self, actor: Principal, user_id: UUID) -> User:
        target = (
            self.db.query(User)
            .filter(User.id == user_id, User.tenant_id == actor.tenant_id)
            .first()
        )
        if target is None:
            raise NotFoundError("User not found")
        return target

    def _enforce(self, actor: Principal, target: User, change: UserChange) -> None:
        try:
            enforce_user_mutation(self.db, actor, target, change)
        except UserMutationDenied:
            # release the admin row locks taken by the guard
            self.db.rollback()
            raise

    def _check_password(self, password: str) -> None:
        is_valid, message = validate_password_strength(password)
        if not is_valid:
            raise InvalidInputError(message)

    def _check_email_free(self, email: str) -> None:
        if self.db.query(User.id).filter(User.email == email).first() is not None:
            raise ConflictError(f"User with email {email} already exists")

    def _audit(self, actor: Principal, action: str, target: User, metadata: dict) -> None:
        log_from_request(
            db=self.db,
            request=self.request,
            tenant_id=actor.tenant_id,
            action=action,
            actor_id=actor.user_id,
            entity_type="user",
            entity_id=target.id,
            metadata=metadata,
        )
