"""Role-based permission matrix for account and record mutations.

can_act_on_role is the pure (actor role, target role, action) table. Handlers
call can_act_on_account, which adds the identity rules (acting on yourself)
on top of the table, and can_assign_role for role changes.
"""

from typing import Literal, Protocol

from app.models.enums import Role

RoleAction = Literal["create", "update", "delete"]
ROLE_ACTIONS: tuple[RoleAction, ...] = ("create", "update", "delete")


class Actor(Protocol):
    """Anything with an id and a role (AuthenticatedUser, PublicAccount)."""

    id: str
    role: Role


def can_act_on_role(actor_role: Role | str, target_role: Role | str, action: str) -> bool:
    """
    Whether actor_role may perform action on an account holding target_role.

    superadmin: anything except superadmin targets.
    admin: anything on editor and user targets.
    editor: update user targets only.
    user: update user targets only.
    Unknown roles or actions are denied.
    """
    actor = Role.parse(actor_role)
    target = Role.parse(target_role)
    if actor is None or target is None or action not in ROLE_ACTIONS:
        return False

    if actor is Role.SUPERADMIN:
        return target is not Role.SUPERADMIN
    if actor is Role.ADMIN:
        return target in (Role.EDITOR, Role.USER)
    if actor in (Role.EDITOR, Role.USER):
        return target is Role.USER and action == "update"
    return False


def can_create_role(actor_role: Role | str, target_role: Role | str) -> bool:
    return can_act_on_role(actor_role, target_role, "create")


def can_update_role(actor_role: Role | str, target_role: Role | str) -> bool:
    return can_act_on_role(actor_role, target_role, "update")


def can_delete_role(actor_role: Role | str, target_role: Role | str) -> bool:
    return can_act_on_role(actor_role, target_role, "delete")


def can_act_on_account(actor: Actor, target_id: str, target_role: Role | str, action: str) -> bool:
    """
    Permission check for a concrete target account or record.

    Acting on yourself: update is allowed, delete and create are not.
    A user-role actor may only touch its own record, even though the role
    table lets user update user.
    """
    if action not in ROLE_ACTIONS:
        return False
    if actor.id == target_id:
        return action == "update"
    if Role.parse(actor.role) is Role.USER:
        return False
    return can_act_on_role(actor.role, target_role, action)


def can_assign_role(actor: Actor, target_id: str | None, current_role: Role | str | None, new_role: Role | str) -> bool:
    """
    Whether actor may give target_id the role new_role.

    Keeping the current role is always fine. Nobody changes their own role;
    otherwise the actor must be allowed to create accounts of new_role.
    """
    new = Role.parse(new_role)
    if new is None:
        return False
    if current_role is not None and Role.parse(current_role) is new:
        return True
    if target_id is not None and actor.id == target_id:
        return False
    return can_create_role(actor.role, new)
