"""Error kinds surfaced by the Wholesale domain.

Validation problems use Protean's ``ValidationError`` and missing records use
``ObjectNotFoundError``. The classes here cover the remaining kinds so callers
can offer "retry" for conflicts and "sign in again" for authorization failures.
"""

from protean.exceptions import InvalidOperationError


class ConflictError(InvalidOperationError):
    """The request is well-formed but clashes with the current persisted state."""


class InvalidTransitionError(ConflictError):
    """A status change that the lifecycle state machine does not allow."""

    def __init__(self, entity, current, target):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition {entity} from {current} to {target}")


class AuthorizationError(Exception):
    """The acting user's role does not permit the requested operation."""
