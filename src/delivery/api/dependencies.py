"""Request dependencies: the calling actor, as vouched for by the gateway."""

from fastapi import Depends, Header

from delivery.shared.actor import Actor, Role
from delivery.shared.errors import UnauthorizedError
from delivery.utils.logging import add_context


async def current_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor:
    if not x_user_id or not x_user_role:
        raise UnauthorizedError("AUTH_REQUIRED", "Authentication is required")
    try:
        role = Role(x_user_role.strip().upper())
    except ValueError:
        raise UnauthorizedError("AUTH_REQUIRED", f"Unknown role: {x_user_role}") from None

    add_context(actor_id=x_user_id, actor_role=role.value)
    return Actor(user_id=x_user_id, role=role.value)


def require_role(*roles: Role):
    async def dependency(actor: Actor = Depends(current_actor)) -> Actor:
        actor.require(*roles)
        return actor

    return dependency


customer = require_role(Role.CUSTOMER)
owner = require_role(Role.OWNER)
shipper = require_role(Role.SHIPPER)
admin = require_role(Role.ADMIN)
