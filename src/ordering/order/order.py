"""Order aggregate (CQRS) — a handwritten-letter order moving through fulfillment.

State Machine:
    PENDING_PAYMENT → PAID → ASSIGNED → WRITING_IN_PROGRESS → DRAFT_UPLOADED → QC_REVIEW
    QC_REVIEW → {CHANGES_REQUESTED, APPROVED}
    CHANGES_REQUESTED → WRITING_IN_PROGRESS
    APPROVED → PACKED → SHIPPED → DELIVERED
    every non-terminal state → CANCELLED

Every accepted transition appends a StatusChange and bumps `revision`; a
rejected one leaves the order untouched.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderTransitioned, WriterAssigned, WriterReassigned


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class WorkflowState(Enum):
    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    ASSIGNED = "assigned"
    WRITING_IN_PROGRESS = "writing_in_progress"
    DRAFT_UPLOADED = "draft_uploaded"
    QC_REVIEW = "qc_review"
    CHANGES_REQUESTED = "changes_requested"
    APPROVED = "approved"
    PACKED = "packed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    CAPTURED = "captured"
    FAILED = "failed"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"


class InputMethod(Enum):
    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"


_S = WorkflowState

_FORWARD_EDGES = {
    _S.PENDING_PAYMENT: {_S.PAID},
    _S.PAID: {_S.ASSIGNED},
    _S.ASSIGNED: {_S.WRITING_IN_PROGRESS},
    _S.WRITING_IN_PROGRESS: {_S.DRAFT_UPLOADED},
    _S.DRAFT_UPLOADED: {_S.QC_REVIEW},
    _S.QC_REVIEW: {_S.CHANGES_REQUESTED, _S.APPROVED},
    _S.CHANGES_REQUESTED: {_S.WRITING_IN_PROGRESS},
    _S.APPROVED: {_S.PACKED},
    _S.PACKED: {_S.SHIPPED},
    _S.SHIPPED: {_S.DELIVERED},
}

TERMINAL_STATES = frozenset({_S.DELIVERED, _S.CANCELLED})

VALID_TRANSITIONS = {
    state: frozenset() if state in TERMINAL_STATES else frozenset(_FORWARD_EDGES[state] | {_S.CANCELLED})
    for state in WorkflowState
}

# States an order can only be in once a writer is attached to it
_WRITER_STATES = frozenset(
    {
        _S.ASSIGNED,
        _S.WRITING_IN_PROGRESS,
        _S.DRAFT_UPLOADED,
        _S.QC_REVIEW,
        _S.CHANGES_REQUESTED,
        _S.APPROVED,
        _S.PACKED,
        _S.SHIPPED,
        _S.DELIVERED,
    }
)


def allowed_targets(state: str | WorkflowState) -> frozenset[str]:
    """States reachable from `state` in one step."""
    return frozenset(s.value for s in VALID_TRANSITIONS[WorkflowState(state)])


def is_terminal(state: str | WorkflowState) -> bool:
    return WorkflowState(state) in TERMINAL_STATES


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class PaymentInfo:
    """Payment provider references and capture status."""

    provider_order_id = String(max_length=100)
    provider_payment_id = String(max_length=100)
    status = String(max_length=20, choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    method = String(max_length=20, choices=PaymentMethod, default=PaymentMethod.ONLINE.value)
    paid_at = DateTime()


@ordering.value_object(part_of="Order")
class ShippingAddress:
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip = String(max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class StatusChange:
    """One entry of the append-only status history."""

    state = String(required=True, max_length=30, choices=WorkflowState)
    actor_id = String(required=True, max_length=100)
    actor_role = String(max_length=20)
    changed_at = DateTime(required=True)
    note = String(max_length=500)
    sequence = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    customer_email = String(max_length=254)
    customer_phone = String(max_length=20)
    workflow_state = String(
        max_length=30,
        choices=WorkflowState,
        default=WorkflowState.PENDING_PAYMENT.value,
    )
    writer_id = Identifier()
    qc_id = Identifier()

    # Product selection and content
    paper_id = Identifier()
    handwriting_style_id = Identifier()
    perfume_id = Identifier()
    add_on_ids = Text()  # JSON list of add-on IDs
    input_method = String(max_length=10, choices=InputMethod, default=InputMethod.TEXT.value)
    message = Text()
    pages = Integer(min_value=1, default=1)

    price = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="INR")
    payment = ValueObject(PaymentInfo)
    shipping_address = ValueObject(ShippingAddress)

    # Fulfillment payload, stamped by the transitions that produce it
    draft_url = String(max_length=500)
    qc_feedback = Text()
    tracking_id = String(max_length=100)
    courier_partner = String(max_length=100)
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancellation_reason = String(max_length=500)

    status_history = HasMany(StatusChange)
    revision = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def writer_attached_once_assigned(self):
        if WorkflowState(self.workflow_state) in _WRITER_STATES and not self.writer_id:
            raise ValidationError({"writer_id": [f"An order in {self.workflow_state} must have a writer"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id: str,
        price: float,
        currency: str = "INR",
        customer_email: str | None = None,
        customer_phone: str | None = None,
        paper_id: str | None = None,
        handwriting_style_id: str | None = None,
        perfume_id: str | None = None,
        add_on_ids: list[str] | None = None,
        input_method: str = InputMethod.TEXT.value,
        message: str | None = None,
        pages: int = 1,
        payment_method: str = PaymentMethod.ONLINE.value,
        provider_order_id: str | None = None,
        shipping_address: dict | None = None,
        now: datetime | None = None,
    ):
        """Create an order awaiting payment, with its first history entry."""
        now = now or datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            customer_email=customer_email,
            customer_phone=customer_phone,
            workflow_state=WorkflowState.PENDING_PAYMENT.value,
            paper_id=paper_id,
            handwriting_style_id=handwriting_style_id,
            perfume_id=perfume_id,
            add_on_ids=json.dumps(add_on_ids or []),
            input_method=input_method,
            message=message,
            pages=pages,
            price=price,
            currency=currency,
            payment=PaymentInfo(
                provider_order_id=provider_order_id,
                status=PaymentStatus.PENDING.value,
                method=payment_method,
            ),
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            revision=0,
            created_at=now,
            updated_at=now,
        )
        order.add_status_history(
            StatusChange(
                state=WorkflowState.PENDING_PAYMENT.value,
                actor_id=str(customer_id),
                actor_role="customer",
                changed_at=now,
                sequence=1,
            )
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                price=price,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def history(self) -> list[StatusChange]:
        """Status history in the order it was written."""
        return sorted(self.status_history or [], key=lambda entry: entry.sequence)

    def can_transition_to(self, target: WorkflowState) -> bool:
        return target in VALID_TRANSITIONS[WorkflowState(self.workflow_state)]

    def _assert_can_transition(self, target: WorkflowState) -> None:
        if not self.can_transition_to(target):
            raise ValidationError(
                {"workflow_state": [f"Cannot transition from {self.workflow_state} to {target.value}"]}
            )

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def advance(
        self,
        target: WorkflowState,
        actor_id: str,
        actor_role: str,
        now: datetime | None = None,
        note: str | None = None,
        writer_id: str | None = None,
        payment_reference: str | None = None,
        draft_url: str | None = None,
        qc_feedback: str | None = None,
        tracking_id: str | None = None,
        courier_partner: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Move to `target`, stamping whatever that transition records.

        Raises ValidationError, with the order unchanged, when the edge does
        not exist or the transition's required details are missing.
        """
        self._assert_can_transition(target)
        if target == WorkflowState.ASSIGNED and not writer_id:
            raise ValidationError({"writer_id": ["A writer is required to assign an order"]})

        now = now or datetime.now(UTC)
        previous = self.workflow_state

        with atomic_change(self):
            if target == WorkflowState.PAID:
                current = self.payment or PaymentInfo()
                self.payment = PaymentInfo(
                    provider_order_id=current.provider_order_id,
                    provider_payment_id=payment_reference or current.provider_payment_id,
                    status=PaymentStatus.CAPTURED.value,
                    method=current.method or PaymentMethod.ONLINE.value,
                    paid_at=now,
                )
            elif target == WorkflowState.ASSIGNED:
                self.writer_id = writer_id
            elif target == WorkflowState.DRAFT_UPLOADED and draft_url:
                self.draft_url = draft_url
            elif target in (WorkflowState.CHANGES_REQUESTED, WorkflowState.APPROVED):
                if actor_role == "qc":
                    self.qc_id = actor_id
                if qc_feedback:
                    self.qc_feedback = qc_feedback
            elif target == WorkflowState.SHIPPED:
                self.tracking_id = tracking_id or self.tracking_id
                self.courier_partner = courier_partner or self.courier_partner
                self.shipped_at = now
            elif target == WorkflowState.DELIVERED:
                self.delivered_at = now
            elif target == WorkflowState.CANCELLED:
                self.cancellation_reason = reason

            self.workflow_state = target.value
            self.revision = (self.revision or 0) + 1
            self.updated_at = now

        self.add_status_history(
            StatusChange(
                state=target.value,
                actor_id=str(actor_id),
                actor_role=actor_role,
                changed_at=now,
                note=note,
                sequence=len(self.status_history or []) + 1,
            )
        )

        if target == WorkflowState.ASSIGNED:
            self.raise_(
                WriterAssigned(
                    order_id=str(self.id),
                    writer_id=writer_id,
                    assigned_by=str(actor_id),
                    assigned_at=now,
                )
            )
        self.raise_(
            OrderTransitioned(
                order_id=str(self.id),
                from_state=previous,
                to_state=target.value,
                actor_id=str(actor_id),
                actor_role=actor_role,
                revision=self.revision,
                transitioned_at=now,
            )
        )

    def reassign_writer(
        self,
        writer_id: str,
        actor_id: str,
        actor_role: str,
        now: datetime | None = None,
        reason: str | None = None,
    ) -> None:
        """Hand an assigned order to another writer without moving its state.

        Raises ValidationError, with the order unchanged, unless the order is
        assigned and `writer_id` names a different writer.
        """
        if self.workflow_state != WorkflowState.ASSIGNED.value:
            raise ValidationError(
                {"workflow_state": [f"Only assigned orders can change writer, not {self.workflow_state}"]}
            )
        if not writer_id:
            raise ValidationError({"writer_id": ["A writer is required to reassign an order"]})
        if str(writer_id) == str(self.writer_id):
            raise ValidationError({"writer_id": [f"Order is already assigned to {writer_id}"]})

        now = now or datetime.now(UTC)
        previous_writer = self.writer_id

        with atomic_change(self):
            self.writer_id = writer_id
            self.revision = (self.revision or 0) + 1
            self.updated_at = now

        self.add_status_history(
            StatusChange(
                state=WorkflowState.ASSIGNED.value,
                actor_id=str(actor_id),
                actor_role=actor_role,
                changed_at=now,
                note=reason or f"Reassigned from {previous_writer}",
                sequence=len(self.status_history or []) + 1,
            )
        )
        self.raise_(
            WriterReassigned(
                order_id=str(self.id),
                previous_writer_id=str(previous_writer) if previous_writer else None,
                writer_id=writer_id,
                reassigned_by=str(actor_id),
                reason=reason,
                revision=self.revision,
                reassigned_at=now,
            )
        )
