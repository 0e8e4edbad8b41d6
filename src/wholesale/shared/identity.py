"""Acting-user boundary.

The identity provider authenticates users elsewhere; the domain only receives
an ``Actor`` carrying an explicit user id and role and trusts it as given.
"""

from dataclasses import dataclass
from enum import Enum

from wholesale.shared.exceptions import AuthorizationError


class Role(Enum):
    ADMIN = "admin"
    SUPPLIER = "supplier"
    CUSTOMER = "customer"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str
    name: str = ""

    def __post_init__(self):
        if not self.user_id:
            raise AuthorizationError("Actor must carry a user id")
        if self.role not in {role.value for role in Role}:
            raise AuthorizationError(f"Unknown role: {self.role}")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def display_name(self) -> str:
        return self.name or self.user_id


def require_role(actor: Actor, *roles: Role) -> None:
    allowed = {role.value for role in roles}
    if actor.role not in allowed:
        raise AuthorizationError(f"Role {actor.role} may not perform this action (requires {', '.join(sorted(allowed))})")


def require_supplier_or_admin(actor: Actor, supplier_id: str) -> None:
    """Admins act on any supplier's data; suppliers only on their own."""
    if actor.is_admin:
        return
    require_role(actor, Role.SUPPLIER)
    if str(actor.user_id) != str(supplier_id):
        raise AuthorizationError(f"Supplier {actor.user_id} may not act on behalf of supplier {supplier_id}")


def verify_portal(actor: Actor, portal: str, revoke_session=None) -> None:
    """Check that a signed-in account uses the portal matching its stored role.

    On mismatch the session is revoked through ``revoke_session`` before the
    error is raised, so the client is not left half-authenticated.
    """
    if actor.role == portal:
        return
    if revoke_session is not None:
        revoke_session(actor)
    raise AuthorizationError(f"Account {actor.user_id} has role {actor.role} and cannot use the {portal} portal")


def actor_from(command) -> Actor:
    """Rebuild the acting user from the actor_* fields every command carries."""
    return Actor(
        user_id=str(command.actor_id) if command.actor_id else "",
        role=command.actor_role,
        name=command.actor_name or "",
    )


def actor_fields(actor: Actor) -> dict:
    return {"actor_id": actor.user_id, "actor_role": actor.role, "actor_name": actor.name}
