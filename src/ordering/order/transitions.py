"""Order transitions and writer reassignment — commands and handlers over OrderWorkflow."""

from protean import handle
from protean.fields import Identifier, String, Text

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.roles import Actor
from ordering.order.workflow import TRANSITION_DETAILS, OrderWorkflow


@ordering.command(part_of="Order")
class TransitionOrder:
    """Request that an order move to `target_state` on behalf of an actor."""

    order_id: Identifier(required=True)
    target_state: String(required=True, max_length=30)
    actor_id: String(required=True, max_length=100)
    actor_role: String(required=True, max_length=20)
    expected_state: String(max_length=30)
    note: String(max_length=500)
    writer_id: Identifier()
    payment_reference: String(max_length=100)
    draft_url: String(max_length=500)
    qc_feedback: Text()
    tracking_id: String(max_length=100)
    courier_partner: String(max_length=100)
    reason: String(max_length=500)


@ordering.command_handler(part_of=Order)
class TransitionOrderHandler:
    @handle(TransitionOrder)
    def transition(self, command):
        details = {
            key: getattr(command, key) for key in TRANSITION_DETAILS if getattr(command, key) is not None
        }
        return OrderWorkflow().transition(
            command.order_id,
            command.target_state,
            Actor(id=command.actor_id, role=command.actor_role),
            expected_state=command.expected_state,
            **details,
        )


@ordering.command(part_of="Order")
class ReassignWriter:
    """Request that an assigned order move to a different writer."""

    order_id: Identifier(required=True)
    writer_id: Identifier(required=True)
    actor_id: String(required=True, max_length=100)
    actor_role: String(required=True, max_length=20)
    reason: String(max_length=500)


@ordering.command_handler(part_of=Order)
class ReassignWriterHandler:
    @handle(ReassignWriter)
    def reassign(self, command):
        return OrderWorkflow().reassign_writer(
            command.order_id,
            command.writer_id,
            Actor(id=command.actor_id, role=command.actor_role),
            reason=command.reason,
        )
