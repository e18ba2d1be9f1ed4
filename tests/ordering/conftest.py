import pytest


@pytest.fixture(autouse=True)
def run_around_tests(ordering_domain):
    """Push domain context before each test, cleanup after."""
    ctx = ordering_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
WRITER_ID = "writer-1"


@pytest.fixture()
def actors():
    from ordering.order.roles import SYSTEM, Actor

    return {
        "system": SYSTEM,
        "admin": Actor(id="admin-1", role="admin"),
        "super_admin": Actor(id="root-1", role="super_admin"),
        "qc": Actor(id="qc-1", role="qc"),
        "writer": Actor(id=WRITER_ID, role="writer"),
        "other_writer": Actor(id="writer-2", role="writer"),
        "customer": Actor(id="cust-1", role="customer"),
    }


@pytest.fixture()
def approved_writer():
    from ordering.writer.roster import approve_writer, register_writer

    register_writer(WRITER_ID, "Asha Writes")
    approve_writer(WRITER_ID)
    return WRITER_ID


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@pytest.fixture()
def workflow(clock):
    from ordering.order.workflow import OrderWorkflow

    return OrderWorkflow(clock=clock)


@pytest.fixture()
def new_order():
    from ordering.order.placement import place_order

    def _place(**payload):
        payload.setdefault("customer_id", "cust-1")
        payload.setdefault("price", 1499.0)
        payload.setdefault("customer_email", "cust@example.com")
        return place_order(**payload)

    return _place


# Happy path from pending_payment; changes_requested branches off qc_review.
_PATH = [
    ("paid", "system", {"payment_reference": "pay_123"}),
    ("assigned", "admin", {"writer_id": WRITER_ID}),
    ("writing_in_progress", "writer", {}),
    ("draft_uploaded", "writer", {"draft_url": "https://files.example.com/draft.pdf"}),
    ("qc_review", "writer", {}),
    ("approved", "qc", {}),
    ("packed", "admin", {}),
    ("shipped", "admin", {"tracking_id": "TRK-42", "courier_partner": "BlueDart"}),
    ("delivered", "admin", {}),
]


@pytest.fixture()
def order_in(new_order, workflow, actors, approved_writer):
    """Place an order and walk it along the workflow until it reaches `state`."""

    def _order_in(state):
        order_id = new_order()
        if state == "pending_payment":
            return order_id
        if state == "cancelled":
            assert workflow.transition(order_id, "cancelled", actors["admin"], reason="Duplicate").ok
            return order_id
        if state == "changes_requested":
            path = [*_PATH[:5], ("changes_requested", "qc", {"qc_feedback": "Smudged ink"})]
        else:
            steps = [target for target, _, _ in _PATH]
            path = _PATH[: steps.index(state) + 1]
        for target, role, details in path:
            result = workflow.transition(order_id, target, actors[role], **details)
            assert result.ok, result.error
        return order_id

    return _order_in


@pytest.fixture()
def load_order():
    from ordering.order.order import Order
    from protean import current_domain

    return lambda order_id: current_domain.repository_for(Order).get(order_id)
