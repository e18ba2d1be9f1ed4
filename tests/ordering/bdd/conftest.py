"""Shared BDD fixtures and step definitions for the order workflow."""

import pytest
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def outcome():
    """Container for the latest transition result."""
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an order in "{state}" state'), target_fixture="order_id")
def an_order_in_state(order_in, state):
    return order_in(state)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the {role:w} moves the order to "{target:w}" expecting "{expected:w}"'))
def move_expecting(workflow, actors, outcome, order_id, role, target, expected):
    outcome["result"] = workflow.transition(order_id, target, actors[role], expected_state=expected)


@when(parsers.cfparse('the {role:w} moves the order to "{target:w}"'))
def move(workflow, actors, outcome, order_id, role, target):
    outcome["result"] = workflow.transition(order_id, target, actors[role])


@when("the admin assigns the order without a writer")
def assign_without_writer(workflow, actors, outcome, order_id):
    outcome["result"] = workflow.transition(order_id, "assigned", actors["admin"])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the transition outcome is "{status}"'))
def transition_outcome_is(outcome, status):
    assert outcome["result"].status.value == status, outcome["result"].error


@then(parsers.cfparse('the order is in "{state}" state'))
def order_is_in_state(load_order, order_id, state):
    assert load_order(order_id).workflow_state == state


@then(parsers.cfparse('the history ends with "{state}"'))
def history_ends_with(load_order, order_id, state):
    assert load_order(order_id).history[-1].state == state
