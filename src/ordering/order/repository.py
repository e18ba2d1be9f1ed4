"""Order store with a version-checked save for workflow changes."""

from protean.exceptions import ExpectedVersionError

from ordering.domain import ordering
from ordering.order.order import Order


class StaleOrderError(Exception):
    """The order changed in storage after it was read."""

    def __init__(self, order_id: str, expected_revision: int):
        self.order_id = order_id
        self.expected_revision = expected_revision
        super().__init__(f"Order {order_id} moved past revision {expected_revision} before this write")


@ordering.repository(part_of=Order)
class OrderRepository:
    def save_transition(self, order: Order, expected_revision: int) -> None:
        """Persist `order` only if nobody wrote it since it was read.

        The write carries the aggregate version it was loaded at, so a rival
        commit at any point after the read fails it with StaleOrderError.
        """
        try:
            self.add(order)
        except ExpectedVersionError as exc:
            raise StaleOrderError(str(order.id), expected_revision) from exc

    def for_customer(self, customer_id: str) -> list[Order]:
        return self._dao.query.filter(customer_id=customer_id).order_by("-created_at").all().items

    def for_writer(self, writer_id: str) -> list[Order]:
        return self._dao.query.filter(writer_id=writer_id).order_by("-updated_at").all().items

    def in_state(self, state: str) -> list[Order]:
        return self._dao.query.filter(workflow_state=state).order_by("created_at").all().items
