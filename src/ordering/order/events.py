"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; it now awaits payment."""

    __version__ = 1

    order_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    price: Float(required=True)
    currency: String(required=True)
    placed_at: DateTime(required=True)


@ordering.event(part_of="Order")
class OrderTransitioned:
    """An order moved along the workflow graph."""

    __version__ = 1

    order_id: Identifier(required=True)
    from_state: String(required=True)
    to_state: String(required=True)
    actor_id: String(required=True)
    actor_role: String(required=True)
    revision: Integer(required=True)
    transitioned_at: DateTime(required=True)


@ordering.event(part_of="Order")
class WriterAssigned:
    __version__ = 1

    order_id: Identifier(required=True)
    writer_id: Identifier(required=True)
    assigned_by: String(required=True)
    assigned_at: DateTime(required=True)


@ordering.event(part_of="Order")
class WriterReassigned:
    """Staff handed an assigned order to a different writer."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_writer_id: Identifier()
    writer_id: Identifier(required=True)
    reassigned_by: String(required=True)
    reason: String(max_length=500)
    revision: Integer(required=True)
    reassigned_at: DateTime(required=True)
