"""Who may move an order into which state.

The role table is plain data so an authorization layer can gate buttons and
endpoints with the same rules the workflow enforces.
"""

from dataclasses import dataclass
from enum import Enum

from ordering.order.order import WorkflowState


class ActorRole(Enum):
    SYSTEM = "system"
    CUSTOMER = "customer"
    WRITER = "writer"
    QC = "qc"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


@dataclass(frozen=True)
class Actor:
    """The authenticated party requesting a transition."""

    id: str
    role: str


SYSTEM = Actor(id="system", role=ActorRole.SYSTEM.value)

_STAFF = frozenset({ActorRole.ADMIN, ActorRole.SUPER_ADMIN})
_REVIEWERS = frozenset({ActorRole.QC, ActorRole.ADMIN, ActorRole.SUPER_ADMIN})

ROLE_TABLE: dict[WorkflowState, frozenset[ActorRole]] = {
    WorkflowState.PENDING_PAYMENT: frozenset(),
    WorkflowState.PAID: frozenset({ActorRole.SYSTEM}),
    WorkflowState.ASSIGNED: _STAFF,
    # Only the writer attached to the order, see `is_permitted`
    WorkflowState.WRITING_IN_PROGRESS: frozenset({ActorRole.WRITER}),
    WorkflowState.DRAFT_UPLOADED: frozenset({ActorRole.WRITER}),
    WorkflowState.QC_REVIEW: frozenset({ActorRole.WRITER}),
    WorkflowState.CHANGES_REQUESTED: _REVIEWERS,
    WorkflowState.APPROVED: _REVIEWERS,
    WorkflowState.PACKED: _STAFF,
    WorkflowState.SHIPPED: _STAFF,
    WorkflowState.DELIVERED: _STAFF,
    WorkflowState.CANCELLED: _STAFF,
}


def eligible_roles(target: str | WorkflowState) -> frozenset[str]:
    """Roles allowed to move an order into `target`."""
    return frozenset(role.value for role in ROLE_TABLE[WorkflowState(target)])


def is_permitted(actor: Actor, target: WorkflowState, writer_id: str | None) -> bool:
    """Check `actor` against the role table; writers must also own the order."""
    role = ActorRole(actor.role)
    if role not in ROLE_TABLE[target]:
        return False
    if role == ActorRole.WRITER:
        return writer_id is not None and str(writer_id) == str(actor.id)
    return True


# Changing the writer of an assigned order is not a state change, so it sits
# outside ROLE_TABLE.
REASSIGNMENT_ROLES: frozenset[ActorRole] = _STAFF


def may_reassign(actor: Actor) -> bool:
    return ActorRole(actor.role) in REASSIGNMENT_ROLES
