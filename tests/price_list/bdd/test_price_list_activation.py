"""BDD tests for price list activation."""

from datetime import date

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from wholesale.price_list.lifecycle import ActivatePriceList, SubmitPriceList
from wholesale.price_list.price_list import PriceList
from wholesale.shared.exceptions import AuthorizationError
from wholesale.shared.identity import Actor, actor_fields

scenarios("features/price_list_activation.feature")


@pytest.fixture()
def lists():
    """Price list ids by their scenario label."""
    return {}


@pytest.fixture()
def outcome():
    return {"result": None, "exc": None}


def _supplier(supplier_id):
    return Actor(user_id=supplier_id, role="supplier", name=supplier_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('supplier "{supplier_id}" has an active price list "{label}" from {start} to {end}'))
def active_list(make_price_list, lists, supplier_id, label, start, end):
    lists[label] = make_price_list(
        _supplier(supplier_id),
        effective_date=date.fromisoformat(start),
        expiry_date=date.fromisoformat(end),
        activate=True,
    )


@given(parsers.cfparse('supplier "{supplier_id}" has a draft price list "{label}" from {start} to {end}'))
def draft_list(make_price_list, lists, supplier_id, label, start, end):
    lists[label] = make_price_list(
        _supplier(supplier_id),
        effective_date=date.fromisoformat(start),
        expiry_date=date.fromisoformat(end),
    )


@given(parsers.cfparse('price list "{label}" is submitted for approval'))
def submitted(lists, label):
    price_list = current_domain.repository_for(PriceList).get(lists[label])
    current_domain.process(
        SubmitPriceList(price_list_id=lists[label], **actor_fields(_supplier(price_list.supplier_id))),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('supplier "{supplier_id}" activates price list "{label}"'))
def activate(lists, outcome, supplier_id, label):
    try:
        outcome["result"] = current_domain.process(
            ActivatePriceList(price_list_id=lists[label], **actor_fields(_supplier(supplier_id))),
            asynchronous=False,
        )
    except AuthorizationError as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('price list "{label}" is "{status}"'))
def list_status(lists, label, status):
    assert current_domain.repository_for(PriceList).get(lists[label]).status == status


@then(parsers.cfparse('supplier "{supplier_id}" has exactly one active price list'))
def one_active(supplier_id):
    assert len(current_domain.repository_for(PriceList).active_for_supplier(supplier_id)) == 1


@then("the activation reports no change")
def no_change(outcome):
    assert outcome["exc"] is None
    assert outcome["result"] is False


@then("the activation is refused")
def refused(outcome):
    assert isinstance(outcome["exc"], AuthorizationError)
