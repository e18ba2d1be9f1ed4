"""Template registry — maps order states and code messages to templates.

Only customer-visible order stages have a template; internal workshop
stages (writing, drafts, review loops, packing) are not announced.
"""

from notifications.templates.order_updates import (
    CancelledTemplate,
    DeliveredTemplate,
    LetterApprovedTemplate,
    ShippedTemplate,
    WriterAssignedTemplate,
)
from notifications.templates.otp_code import OTPCodeTemplate

ORDER_STATE_TEMPLATES: dict[str, type] = {
    "assigned": WriterAssignedTemplate,
    "approved": LetterApprovedTemplate,
    "shipped": ShippedTemplate,
    "delivered": DeliveredTemplate,
    "cancelled": CancelledTemplate,
}


def get_order_template(state: str):
    """Template class announcing `state`, or None when the state is not announced."""
    return ORDER_STATE_TEMPLATES.get(state)


def get_code_template():
    return OTPCodeTemplate
