"""Request-scoped dependencies shared by the routers."""

import structlog
from fastapi import Header

from wholesale.shared.identity import Actor, verify_portal
from wholesale.utils.logging import bind_actor

logger = structlog.get_logger(__name__)


def _revoke_session(actor: Actor) -> None:
    # Sessions are issued upstream; the 403 that follows tells the client to sign in again
    logger.warning("Session revoked after portal mismatch", actor_id=actor.user_id, actor_role=actor.role)


async def current_actor(
    x_user_id: str = Header(...),
    x_user_role: str = Header(...),
    x_user_name: str = Header(""),
    x_portal: str | None = Header(None),
) -> Actor:
    """The acting user, as asserted by the identity provider in front of the API.

    When the client names the portal it is using, the user's stored role must
    match it.
    """
    actor = Actor(user_id=x_user_id, role=x_user_role, name=x_user_name)
    bind_actor(actor)
    if x_portal is not None:
        verify_portal(actor, x_portal, revoke_session=_revoke_session)
    return actor
