"""Role-based authorization policy.

Every "who may do what to whose content" decision in GyanSetu goes through
:func:`check`. Callers pass the acting user's role and id, the role and id
of the user the action targets (usually the content author), and the
action. The function returns ``None`` when the action is allowed and the
denial message otherwise.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from gyansetu.core.exceptions import PermissionDeniedError


class Role(StrEnum):
    """Roles a profile can hold."""

    STUDENT = "student"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Action(StrEnum):
    """Actions governed by the policy."""

    VOTE = "vote"
    EDIT = "edit"
    DELETE = "delete"
    ACCEPT_ANSWER = "accept_answer"
    MARK_BEST_ANSWER = "mark_best_answer"
    AUTHOR_QUESTION = "author_question"
    MODERATE = "moderate"
    CHANGE_ROLE = "change_role"


STAFF_ROLES = frozenset({Role.ADMIN, Role.SUPERADMIN})


def parse_role(value: Any) -> Role:
    """Return a :class:`Role`, defaulting to student for missing/unknown values."""
    if isinstance(value, Role):
        return value
    if value is None:
        return Role.STUDENT
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        return Role.STUDENT


def is_staff(role: Any) -> bool:
    """Return True for admins and superadmins."""
    return parse_role(role) in STAFF_ROLES


def _check_vote(actor_role: Role, actor_id: int, target_role: Role, target_id: int) -> str | None:
    if actor_id == target_id:
        return "You cannot vote on your own content"
    if target_role in STAFF_ROLES:
        if actor_role == Role.STUDENT:
            return "Students cannot vote on admin/superadmin content"
        return "Admins cannot vote on other admin/superadmin content"
    return None


def _check_manage(
    actor_role: Role, actor_id: int, target_role: Role, target_id: int, verb: str
) -> str | None:
    if actor_id == target_id or actor_role == Role.SUPERADMIN:
        return None
    if actor_role == Role.STUDENT:
        return f"You can only {verb} your own content"
    if target_role in STAFF_ROLES:
        return f"Admins cannot {verb} other admin/superadmin content"
    return None


def _check_change_role(
    actor_role: Role, actor_id: int, target_role: Role, target_id: int
) -> str | None:
    if actor_role not in STAFF_ROLES:
        return "You don't have permission to perform this action."
    if actor_id == target_id:
        return "You cannot change your own role"
    if target_role == Role.SUPERADMIN:
        return "SuperAdmin cannot be modified."
    if target_role == Role.ADMIN and actor_role != Role.SUPERADMIN:
        return "You don't have permission to modify other admins."
    return None


def check(
    actor_role: Any,
    actor_id: int,
    target_role: Any,
    target_id: int | None,
    action: Action,
) -> str | None:
    """Evaluate the policy for one action.

    Args:
        actor_role: Role of the user performing the action.
        actor_id: Identifier of the user performing the action.
        target_role: Role of the user the action is aimed at. For content
            actions this is the content author; for ``ACCEPT_ANSWER`` it is
            the question author.
        target_id: Identifier of that user, or None when not applicable.
        action: The action being attempted.

    Returns:
        None when allowed, otherwise a human-readable denial message.
    """
    actor = parse_role(actor_role)
    target = parse_role(target_role)
    target_key = -1 if target_id is None else target_id

    if action == Action.VOTE:
        return _check_vote(actor, actor_id, target, target_key)
    if action == Action.EDIT:
        return _check_manage(actor, actor_id, target, target_key, "edit")
    if action == Action.DELETE:
        return _check_manage(actor, actor_id, target, target_key, "delete")
    if action == Action.ACCEPT_ANSWER:
        if actor in STAFF_ROLES or actor_id == target_key:
            return None
        return "Only the question author or admins can accept answers"
    if action == Action.MARK_BEST_ANSWER:
        if actor not in STAFF_ROLES:
            return "Only admins and superadmins can mark best answers"
        if target != Role.STUDENT:
            return "Only student answers can be marked as best answer"
        return None
    if action == Action.AUTHOR_QUESTION:
        if actor in STAFF_ROLES:
            return "Admins cannot ask questions"
        return None
    if action == Action.MODERATE:
        if actor not in STAFF_ROLES:
            return "Only admins and superadmins can moderate content"
        return None
    if action == Action.CHANGE_ROLE:
        return _check_change_role(actor, actor_id, target, target_key)
    raise ValueError(f"Unknown action: {action}")


def is_allowed(
    actor_role: Any,
    actor_id: int,
    target_role: Any,
    target_id: int | None,
    action: Action,
) -> bool:
    """Return True when :func:`check` allows the action."""
    return check(actor_role, actor_id, target_role, target_id, action) is None


def enforce(
    actor_role: Any,
    actor_id: int,
    target_role: Any,
    target_id: int | None,
    action: Action,
) -> None:
    """Raise :class:`PermissionDeniedError` when the action is not allowed."""
    reason = check(actor_role, actor_id, target_role, target_id, action)
    if reason is not None:
        raise PermissionDeniedError(reason)
