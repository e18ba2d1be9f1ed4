from notifications.channel import EMAIL, MOBILE, get_channel
from notifications.dispatcher import ChannelDispatcher, get_dispatcher, reset_dispatcher
from notifications.templates import get_order_template


class TestCodeDelivery:
    def test_email_code(self):
        assert ChannelDispatcher().send(EMAIL, "user@example.com", "482913", ttl_minutes=5)

        [message] = get_channel(EMAIL).messages_to("user@example.com")
        assert "482913" in message["body"]
        assert "5 minutes" in message["body"]

    def test_sms_code(self):
        assert ChannelDispatcher().send(MOBILE, "+919876543210", "004217")

        [message] = get_channel(MOBILE).messages_to("+919876543210")
        assert message["body"].startswith("004217")

    def test_purpose_changes_the_wording(self):
        ChannelDispatcher().send(EMAIL, "user@example.com", "123456", purpose="signup")
        [message] = get_channel(EMAIL).outbox
        assert "finish creating your account" in message["body"]

    def test_failed_delivery_returns_false(self):
        get_channel(EMAIL).configure(should_succeed=False)
        assert ChannelDispatcher().send(EMAIL, "user@example.com", "123456") is False

    def test_crashed_transport_returns_false(self):
        get_channel(MOBILE).configure(should_raise=True)
        assert ChannelDispatcher().send(MOBILE, "+919876543210", "123456") is False

    def test_unknown_channel_returns_false(self):
        assert ChannelDispatcher().send("pigeon", "coop-7", "123456") is False


class TestOrderStateChanges:
    def test_unannounced_state_sends_nothing(self):
        assert get_order_template("writing_in_progress") is None
        assert ChannelDispatcher().order_state_changed("ord-1", "writing_in_progress", email="c@example.com")
        assert get_channel(EMAIL).outbox == []

    def test_no_contact_sends_nothing(self):
        assert ChannelDispatcher().order_state_changed("ord-1", "delivered")
        assert get_channel(EMAIL).outbox == []

    def test_both_channels(self):
        delivered = ChannelDispatcher().order_state_changed(
            "ord-1",
            "cancelled",
            email="c@example.com",
            phone="+919876543210",
            context={"reason": "Paper out of stock"},
        )

        assert delivered
        [email] = get_channel(EMAIL).outbox
        assert "Paper out of stock" in email["body"]
        [sms] = get_channel(MOBILE).outbox
        assert "ord-1" in sms["body"]

    def test_partial_failure_is_reported(self):
        get_channel(MOBILE).configure(should_succeed=False)
        delivered = ChannelDispatcher().order_state_changed(
            "ord-1", "delivered", email="c@example.com", phone="+919876543210"
        )
        assert delivered is False
        assert len(get_channel(EMAIL).outbox) == 1


class TestDispatcherSingleton:
    def test_singleton(self):
        assert get_dispatcher() is get_dispatcher()

    def test_reset(self):
        first = get_dispatcher()
        reset_dispatcher()
        assert get_dispatcher() is not first
