"""Access policy keyed by ``(actor role, owner role, action)``.

The owner role of a submission is the role of the actor that created it, or
``None`` for submissions coming from the public form. Every lookup yields a
scope: ``GLOBAL`` (any branch), ``BRANCH`` (only the actor's own branch) or
``DENY``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final

from account_opening.domain.errors import AccessDeniedError
from account_opening.domain.model import ActorRole

if TYPE_CHECKING:
    from account_opening.domain.model import Actor, Submission


class Action(StrEnum):
    VIEW = "view"
    SET_STATUS = "set_status"
    EDIT = "edit"
    EXPORT = "export"
    IMPORT = "import"
    DELETE = "delete"


class Scope(StrEnum):
    GLOBAL = "global"
    BRANCH = "branch"
    DENY = "deny"


type OwnerRole = ActorRole | None
type PolicyKey = tuple[ActorRole, OwnerRole, Action]

_OWNERS: Final[tuple[OwnerRole, ...]] = (None, *ActorRole)
_READ_ONLY: Final[frozenset[Action]] = frozenset({Action.VIEW, Action.EXPORT})


def _build_policy() -> dict[PolicyKey, Scope]:
    policy: dict[PolicyKey, Scope] = {}
    for owner in _OWNERS:
        for action in Action:
            policy[(ActorRole.GLOBAL_ADMIN, owner, action)] = Scope.GLOBAL

            # branch admins may review but not rewrite or purge records owned by global admins
            if owner is ActorRole.GLOBAL_ADMIN and action not in {*_READ_ONLY, Action.SET_STATUS}:
                policy[(ActorRole.BRANCH_ADMIN, owner, action)] = Scope.DENY
            else:
                policy[(ActorRole.BRANCH_ADMIN, owner, action)] = Scope.BRANCH

            if action in {Action.IMPORT, Action.DELETE}:
                staff_scope = Scope.DENY
            elif action in _READ_ONLY or owner in {None, ActorRole.STAFF}:
                staff_scope = Scope.BRANCH
            else:
                staff_scope = Scope.DENY
            policy[(ActorRole.STAFF, owner, action)] = staff_scope
    return policy


POLICY: Final[dict[PolicyKey, Scope]] = _build_policy()


def scope_for(actor: Actor, action: Action, owner_role: OwnerRole = None) -> Scope:
    return POLICY.get((actor.role, owner_role, action), Scope.DENY)


def is_allowed(
    actor: Actor,
    action: Action,
    *,
    branch_id: int | None = None,
    owner_role: OwnerRole = None,
) -> bool:
    scope = scope_for(actor, action, owner_role)
    if scope is Scope.DENY:
        return False
    if scope is Scope.BRANCH and branch_id is not None:
        return actor.branch_id == branch_id
    return True


def ensure_allowed(
    actor: Actor,
    action: Action,
    *,
    branch_id: int | None = None,
    owner_role: OwnerRole = None,
) -> None:
    """Raise ``AccessDeniedError`` unless the policy grants ``action``."""

    scope = scope_for(actor, action, owner_role)
    if scope is Scope.DENY:
        owner = owner_role.value if owner_role is not None else "customer"
        raise AccessDeniedError(f"Role {actor.role.value} may not {action.value} {owner} records")
    if scope is Scope.BRANCH and branch_id is not None and actor.branch_id != branch_id:
        raise AccessDeniedError(
            f"Actor of branch {actor.branch_id} may not {action.value} "
            f"records of branch {branch_id}"
        )


def ensure_submission_access(actor: Actor, action: Action, submission: Submission) -> None:
    ensure_allowed(
        actor,
        action,
        branch_id=submission.branch_id,
        owner_role=submission.created_by_role,
    )


def can_access_submission(actor: Actor, action: Action, submission: Submission) -> bool:
    return is_allowed(
        actor,
        action,
        branch_id=submission.branch_id,
        owner_role=submission.created_by_role,
    )


def effective_branch_filter(actor: Actor, action: Action, requested: int | None) -> int | None:
    """Branch restriction for list-style operations.

    Global scope honours ``requested`` as is; branch scope pins the filter to the
    actor's branch and rejects a request for a different one.
    """

    scope = scope_for(actor, action)
    if scope is Scope.DENY:
        raise AccessDeniedError(f"Role {actor.role.value} may not {action.value} submissions")
    if scope is Scope.GLOBAL:
        return requested
    if requested is not None and requested != actor.branch_id:
        raise AccessDeniedError(
            f"Actor of branch {actor.branch_id} may not {action.value} branch {requested}"
        )
    return actor.branch_id
