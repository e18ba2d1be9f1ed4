"""Order workflow: the one entry point for moving an order between states.

Checks run in a fixed order and the first failure decides the outcome:

    validation → load → expected state → graph edge → role → assignment rules
    → revision-checked write → best-effort notification

Nothing is written unless every check passes.
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from notifications.dispatcher import NotificationDispatcher, get_dispatcher
from ordering.order.order import Order, WorkflowState
from ordering.order.repository import StaleOrderError
from ordering.order.roles import Actor, ActorRole, is_permitted, may_reassign
from ordering.utils.logging import get_logger
from ordering.writer.writer import WriterProfile
from shared.timestamps import utcnow

logger = get_logger(__name__)

TRANSITION_DETAILS = frozenset(
    {
        "note",
        "writer_id",
        "payment_reference",
        "draft_url",
        "qc_feedback",
        "tracking_id",
        "courier_partner",
        "reason",
    }
)


class TransitionStatus(Enum):
    OK = "ok"
    ILLEGAL_TRANSITION = "illegal_transition"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    INVALID = "invalid"


@dataclass(frozen=True)
class TransitionResult:
    status: TransitionStatus
    order_id: str | None = None
    state: str | None = None
    revision: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == TransitionStatus.OK


def _first_message(exc: ValidationError) -> str:
    messages = getattr(exc, "messages", None) or {}
    for errors in messages.values():
        if errors:
            return str(errors[0])
    return str(exc)


class OrderWorkflow:
    """Applies transitions to orders in the active ordering domain context.

    Args:
        dispatcher: Told about every successful transition. Defaults to the
            process-wide notification dispatcher.
        clock: Zero-argument callable returning the current aware datetime.
    """

    def __init__(self, dispatcher: NotificationDispatcher | None = None, clock=None):
        self.dispatcher = dispatcher or get_dispatcher()
        self.clock = clock or utcnow

    def transition(
        self,
        order_id: str,
        target_state: str,
        actor: Actor,
        expected_state: str | None = None,
        **details,
    ) -> TransitionResult:
        # Validation, before touching storage
        try:
            target = WorkflowState(target_state)
        except ValueError:
            return TransitionResult(TransitionStatus.INVALID, order_id, error=f"Unknown state: {target_state!r}")
        if expected_state is not None and expected_state not in {s.value for s in WorkflowState}:
            return TransitionResult(
                TransitionStatus.INVALID, order_id, error=f"Unknown expected state: {expected_state!r}"
            )
        if actor is None or not actor.id:
            return TransitionResult(TransitionStatus.INVALID, order_id, error="An actor is required")
        if actor.role not in {r.value for r in ActorRole}:
            return TransitionResult(TransitionStatus.INVALID, order_id, error=f"Unknown role: {actor.role!r}")
        unknown = set(details) - TRANSITION_DETAILS
        if unknown:
            return TransitionResult(
                TransitionStatus.INVALID, order_id, error=f"Unexpected details: {', '.join(sorted(unknown))}"
            )

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
        except ObjectNotFoundError:
            return TransitionResult(TransitionStatus.NOT_FOUND, order_id, error=f"Order {order_id} not found")

        current = order.workflow_state
        if expected_state is not None and expected_state != current:
            return TransitionResult(
                TransitionStatus.CONFLICT,
                order_id,
                state=current,
                revision=order.revision,
                error=f"Order is {current}, not {expected_state}",
            )

        if not order.can_transition_to(target):
            return TransitionResult(
                TransitionStatus.ILLEGAL_TRANSITION,
                order_id,
                state=current,
                revision=order.revision,
                error=f"Cannot transition from {current} to {target.value}",
            )

        if not is_permitted(actor, target, order.writer_id):
            logger.warning(
                "Transition forbidden",
                order_id=order_id,
                target=target.value,
                actor_id=actor.id,
                actor_role=actor.role,
            )
            return TransitionResult(
                TransitionStatus.FORBIDDEN,
                order_id,
                state=current,
                revision=order.revision,
                error=f"Role {actor.role} may not move an order to {target.value}",
            )

        if target == WorkflowState.ASSIGNED:
            rejection = self._check_writer(order_id, details.get("writer_id"))
            if rejection is not None:
                return rejection

        expected_revision = order.revision or 0
        try:
            order.advance(target, actor.id, actor.role, now=self.clock(), **details)
        except ValidationError as exc:
            return TransitionResult(TransitionStatus.INVALID, order_id, state=current, error=_first_message(exc))

        try:
            repo.save_transition(order, expected_revision)
        except StaleOrderError as exc:
            logger.warning("Concurrent transition lost", order_id=order_id, target=target.value, error=str(exc))
            return TransitionResult(TransitionStatus.CONFLICT, order_id, error="Order was changed by someone else")

        logger.info(
            "Order transitioned",
            order_id=order_id,
            from_state=current,
            to_state=target.value,
            actor_id=actor.id,
            revision=order.revision,
        )
        self._notify(order)
        return TransitionResult(TransitionStatus.OK, order_id, state=order.workflow_state, revision=order.revision)

    def reassign_writer(
        self,
        order_id: str,
        writer_id: str,
        actor: Actor,
        reason: str | None = None,
    ) -> TransitionResult:
        """Hand an assigned order to another approved writer.

        The order stays `assigned`; the change is recorded in the status
        history and bumps the revision like any transition. Staff only.
        """
        if actor is None or not actor.id:
            return TransitionResult(TransitionStatus.INVALID, order_id, error="An actor is required")
        if actor.role not in {r.value for r in ActorRole}:
            return TransitionResult(TransitionStatus.INVALID, order_id, error=f"Unknown role: {actor.role!r}")

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
        except ObjectNotFoundError:
            return TransitionResult(TransitionStatus.NOT_FOUND, order_id, error=f"Order {order_id} not found")

        current = order.workflow_state
        if current != WorkflowState.ASSIGNED.value:
            return TransitionResult(
                TransitionStatus.ILLEGAL_TRANSITION,
                order_id,
                state=current,
                revision=order.revision,
                error=f"Only assigned orders can change writer, not {current}",
            )

        if not may_reassign(actor):
            logger.warning("Reassignment forbidden", order_id=order_id, actor_id=actor.id, actor_role=actor.role)
            return TransitionResult(
                TransitionStatus.FORBIDDEN,
                order_id,
                state=current,
                revision=order.revision,
                error=f"Role {actor.role} may not reassign writers",
            )

        rejection = self._check_writer(order_id, writer_id)
        if rejection is not None:
            return rejection

        expected_revision = order.revision or 0
        previous_writer = order.writer_id
        try:
            order.reassign_writer(writer_id, actor.id, actor.role, now=self.clock(), reason=reason)
        except ValidationError as exc:
            return TransitionResult(TransitionStatus.INVALID, order_id, state=current, error=_first_message(exc))

        try:
            repo.save_transition(order, expected_revision)
        except StaleOrderError as exc:
            logger.warning("Concurrent reassignment lost", order_id=order_id, error=str(exc))
            return TransitionResult(TransitionStatus.CONFLICT, order_id, error="Order was changed by someone else")

        logger.info(
            "Writer reassigned",
            order_id=order_id,
            previous_writer_id=previous_writer,
            writer_id=writer_id,
            actor_id=actor.id,
            revision=order.revision,
        )
        return TransitionResult(TransitionStatus.OK, order_id, state=order.workflow_state, revision=order.revision)

    def _check_writer(self, order_id: str, writer_id: str | None) -> TransitionResult | None:
        if not writer_id:
            return TransitionResult(
                TransitionStatus.INVALID, order_id, error="A writer is required to assign an order"
            )
        profile = current_domain.repository_for(WriterProfile).find_by_user(writer_id)
        if profile is None:
            return TransitionResult(TransitionStatus.NOT_FOUND, order_id, error=f"Writer {writer_id} not found")
        if not profile.is_approved:
            return TransitionResult(
                TransitionStatus.INVALID, order_id, error=f"Writer {writer_id} is {profile.status}, not approved"
            )
        return None

    def _notify(self, order: Order) -> None:
        context = {
            "writer_id": order.writer_id,
            "tracking_id": order.tracking_id,
            "courier_partner": order.courier_partner,
            "reason": order.cancellation_reason,
        }
        try:
            delivered = self.dispatcher.order_state_changed(
                str(order.id),
                order.workflow_state,
                email=order.customer_email,
                phone=order.customer_phone,
                context=context,
            )
        except Exception as e:
            logger.error("Order notification raised", order_id=str(order.id), error=str(e))
            return
        if not delivered:
            logger.warning("Order notification not delivered", order_id=str(order.id), state=order.workflow_state)
