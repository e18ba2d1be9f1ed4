"""Application tests for notifications sent on order state changes."""

from notifications.channel import EMAIL, MOBILE, get_channel
from notifications.dispatcher import NotificationDispatcher
from ordering.order.workflow import OrderWorkflow, TransitionStatus


class ExplodingDispatcher(NotificationDispatcher):
    def send(self, channel, identifier, code, purpose="login", ttl_minutes=5):
        raise RuntimeError("transport down")

    def order_state_changed(self, order_id, state, email=None, phone=None, context=None):
        raise RuntimeError("transport down")


class TestOrderNotifications:
    def test_shipping_notifies_the_customer(self, order_in):
        order_id = order_in("shipped")

        messages = get_channel(EMAIL).messages_to("cust@example.com")
        shipped = [m for m in messages if m["subject"] == "Your letter is on its way!"]
        assert len(shipped) == 1
        assert "TRK-42" in shipped[0]["body"]
        assert order_id in shipped[0]["body"]

    def test_internal_states_are_silent(self, new_order, workflow, actors):
        order_id = new_order()
        workflow.transition(order_id, "paid", actors["system"])
        assert get_channel(EMAIL).outbox == []

    def test_phone_gets_an_sms(self, new_order, workflow, actors):
        order_id = new_order(customer_phone="+919876543210")
        workflow.transition(order_id, "cancelled", actors["admin"], reason="Out of ivory paper")

        [sms] = get_channel(MOBILE).messages_to("+919876543210")
        assert order_id in sms["body"]

    def test_transport_failure_does_not_undo_the_transition(self, new_order, actors, clock, load_order):
        workflow = OrderWorkflow(dispatcher=ExplodingDispatcher(), clock=clock)
        order_id = new_order()

        result = workflow.transition(order_id, "cancelled", actors["admin"], reason="Fraud check")

        assert result.status == TransitionStatus.OK
        assert load_order(order_id).workflow_state == "cancelled"

    def test_failed_delivery_does_not_undo_the_transition(self, new_order, workflow, actors, load_order):
        get_channel(EMAIL).configure(should_succeed=False)
        order_id = new_order()

        assert workflow.transition(order_id, "cancelled", actors["admin"]).ok
        assert load_order(order_id).workflow_state == "cancelled"
