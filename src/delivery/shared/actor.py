"""The caller of an operation: a verified user id and the role it acts in."""

from enum import Enum

from protean.fields import Identifier, String

from delivery.domain import delivery
from delivery.shared.errors import ForbiddenError


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    OWNER = "OWNER"
    SHIPPER = "SHIPPER"
    ADMIN = "ADMIN"


@delivery.value_object
class Actor:
    """Identity and role supplied by the upstream gateway.

    Passed explicitly into every operation that is gated by role or ownership.
    """

    user_id = Identifier(required=True)
    role = String(required=True, choices=Role)

    def require(self, *roles: Role) -> None:
        if Role(self.role) not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise ForbiddenError("ROLE_FORBIDDEN", f"This action requires role {allowed}")


def actor_from(command) -> Actor:
    """Build the actor carried on a command as ``actor_id`` and ``actor_role``."""
    return Actor(user_id=command.actor_id, role=command.actor_role)
