"""Ordering bounded context — order fulfillment workflow and writer roster.

Moves a handwritten-letter order from payment through writing, quality
control, packing and delivery. Every state change is checked against the
workflow graph and the role table, recorded in the order's status history,
and written with an optimistic revision check.
"""

from protean.domain import Domain

from ordering.utils.logging import get_logger

logger = get_logger(__name__)

ordering = Domain(name="ordering")
