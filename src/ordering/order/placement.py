"""Order placement — command and handler.

The checkout collaborator places an order, takes payment, then moves the
order to `paid` as the system actor.
"""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import InputMethod, Order, PaymentMethod
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


def place_order(customer_id: str, price: float, **payload) -> str:
    """Create an order in `pending_payment`; returns its id."""
    order = Order.place(customer_id=customer_id, price=price, **payload)
    current_domain.repository_for(Order).add(order)
    logger.info("Order placed", order_id=str(order.id), customer_id=str(customer_id), price=price)
    return str(order.id)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default="INR")
    customer_email: String(max_length=254)
    customer_phone: String(max_length=20)
    paper_id: Identifier()
    handwriting_style_id: Identifier()
    perfume_id: Identifier()
    add_on_ids: Text()  # JSON list of add-on IDs
    input_method: String(max_length=10, default=InputMethod.TEXT.value)
    message: Text()
    pages: Integer(min_value=1, default=1)
    payment_method: String(max_length=20, default=PaymentMethod.ONLINE.value)
    provider_order_id: String(max_length=100)
    shipping_address: Text()  # JSON object: street, city, state, zip, country


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        return place_order(
            customer_id=command.customer_id,
            price=command.price,
            currency=command.currency,
            customer_email=command.customer_email,
            customer_phone=command.customer_phone,
            paper_id=command.paper_id,
            handwriting_style_id=command.handwriting_style_id,
            perfume_id=command.perfume_id,
            add_on_ids=json.loads(command.add_on_ids) if command.add_on_ids else None,
            input_method=command.input_method,
            message=command.message,
            pages=command.pages,
            payment_method=command.payment_method,
            provider_order_id=command.provider_order_id,
            shipping_address=json.loads(command.shipping_address) if command.shipping_address else None,
        )
