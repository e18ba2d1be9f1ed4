"""Order progress templates — sent when an order reaches a customer-visible stage."""


class WriterAssignedTemplate:
    template_key = "writer_assigned"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": "A writer has picked up your letter",
            "body": (
                f"Good news! Order #{order_id} has been assigned to one of our writers, "
                "who will start on your letter shortly."
            ),
            "sms": f"Order #{order_id}: a writer has been assigned to your letter.",
        }


class LetterApprovedTemplate:
    template_key = "qc_completed"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": "Your letter passed quality review",
            "body": f"Your letter for order #{order_id} passed our quality review and is being packed.",
            "sms": f"Order #{order_id}: your letter passed quality review.",
        }


class ShippedTemplate:
    template_key = "shipped"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        courier = context.get("courier_partner") or "our courier"
        tracking_id = context.get("tracking_id") or "N/A"
        return {
            "subject": "Your letter is on its way!",
            "body": (
                f"Order #{order_id} has shipped with {courier}.\n\n"
                f"Tracking ID: {tracking_id}\n"
            ),
            "sms": f"Order #{order_id} shipped via {courier}. Tracking: {tracking_id}",
        }


class DeliveredTemplate:
    template_key = "delivered"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": "Your letter has been delivered",
            "body": f"Order #{order_id} has been delivered. We hope it made someone's day.",
            "sms": f"Order #{order_id} has been delivered.",
        }


class CancelledTemplate:
    template_key = "cancelled"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        reason = context.get("reason") or "No reason was given."
        return {
            "subject": "Your order was cancelled",
            "body": f"Order #{order_id} has been cancelled.\n\nReason: {reason}",
            "sms": f"Order #{order_id} has been cancelled.",
        }
