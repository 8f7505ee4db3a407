"""
Test suite for property specifications - comparable, string and collection helpers.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from symspec import Property, evaluate_with_trace, where
from symspec.expr import Compare, Const, Member
from symspec.properties import PropertySpecification

from .conftest import Customer, Product

CREATED = datetime(2024, 1, 1)


@pytest.fixture
def price() -> PropertySpecification:
    return Property.of(lambda p: p.price)


@pytest.fixture
def customer_name() -> PropertySpecification:
    return Property.of(lambda c: c.name)


def customer(name: str | None = "Ada", orders: list[float] | None = None) -> Customer:
    return Customer(name, CREATED, orders=orders)


class TestSelection:
    def test_path_is_a_tree_over_the_param(self, price):
        assert price.path == Member(price.param, "price")
        assert repr(price) == f"PropertySpecification({price.path!r})"

    def test_nested_path(self, by_name):
        spec = Property.of(lambda p: p.name.upper()).equal_to("LAMP")
        assert spec(by_name["Lamp"])
        assert spec.explain() == "name.upper() == 'LAMP'"

    def test_entity_type(self):
        assert Property.of(lambda p: p.price, entity_type=Product).param.entity_type is Product


class TestComparable:
    @pytest.mark.parametrize(
        ("build", "expected"),
        [
            (lambda p: p.greater_than(299), ["Laptop", "Phone", "Tablet"]),
            (lambda p: p.greater_than_or_equal(299), ["Laptop", "Phone", "Tablet", "Desk"]),
            (lambda p: p.less_than(149), ["Lamp"]),
            (lambda p: p.less_than_or_equal(149), ["Chair", "Lamp"]),
            (lambda p: p.in_range(149, 399), ["Tablet", "Chair", "Desk"]),
            (lambda p: p.in_range_exclusive(149, 399), ["Desk"]),
            (lambda p: p.outside_range(149, 399), ["Laptop", "Phone", "Lamp"]),
            (lambda p: p.equal_to(599), ["Phone"]),
            (lambda p: p.not_equal_to(599), ["Laptop", "Tablet", "Chair", "Desk", "Lamp"]),
            (lambda p: p.in_([49, 999]), ["Laptop", "Lamp"]),
            (lambda p: p.not_in([49, 999]), ["Phone", "Tablet", "Chair", "Desk"]),
            (lambda p: p.matches(lambda v: v + 1 > 300), ["Laptop", "Phone", "Tablet"]),
        ],
    )
    def test_filters(self, products, price, build, expected):
        spec = build(price)
        assert [p.name for p in products if spec(p)] == expected

    def test_range_explain(self, price):
        assert price.in_range(100, 500).explain() == "(price >= 100) AND (price <= 500)"

    def test_matches_inlines_the_path(self, price):
        lam = price.matches(lambda v: v > 10).to_symbolic()
        assert lam.body == Compare(">", Member(lam.param, "price"), Const(10))
        assert price.matches(where(lambda v: v > 10)).explain() == "price > 10"


class TestStrings:
    def test_prefix_suffix_and_substring(self, customer_name):
        ada = customer("Ada Lovelace")
        assert customer_name.starts_with("Ada")(ada)
        assert customer_name.ends_with("lace")(ada)
        assert customer_name.contains("Love")(ada)
        assert not customer_name.contains("love")(ada)

    def test_case_insensitive(self, customer_name):
        ada = customer("Ada Lovelace")
        assert customer_name.equals_ignore_case("ADA LOVELACE")(ada)
        assert customer_name.contains_ignore_case("LOVE")(ada)
        assert not customer_name.equals_ignore_case("ada")(ada)

    @pytest.mark.parametrize(
        ("value", "none_or_empty", "none_or_whitespace", "content"),
        [
            (None, True, True, False),
            ("", True, True, False),
            ("   ", False, True, False),
            ("Ada", False, False, True),
        ],
    )
    def test_none_guards(self, customer_name, value, none_or_empty, none_or_whitespace, content):
        entity = customer(value)
        assert customer_name.is_none_or_empty()(entity) is none_or_empty
        assert customer_name.is_not_none_or_empty()(entity) is (not none_or_empty)
        assert customer_name.is_none_or_whitespace()(entity) is none_or_whitespace
        assert customer_name.has_content()(entity) is content

    def test_none_guard_is_safe_under_a_full_trace(self, customer_name):
        passed, details = evaluate_with_trace(customer_name.has_content(), customer(None))
        assert passed is False
        assert len(details) == 1

    def test_length(self, customer_name):
        ada = customer("Ada")
        assert customer_name.has_length(3)(ada)
        assert customer_name.has_length_between(1, 3)(ada)
        assert not customer_name.has_length_between(4, 10)(ada)

    def test_none_and_membership(self, customer_name):
        assert customer_name.is_none()(customer(None))
        assert customer_name.is_not_none()(customer("Ada"))


class TestCollections:
    @pytest.fixture
    def orders(self) -> PropertySpecification:
        return Property.of(lambda c: c.orders)

    def test_counts(self, orders):
        regular = customer(orders=[20.0, 150.0, 80.0])
        assert orders.has_count(3)(regular)
        assert orders.has_min_count(2)(regular)
        assert orders.has_max_count(3)(regular)
        assert not orders.has_max_count(2)(regular)
        assert orders.is_not_empty()(regular)
        assert orders.is_empty()(customer(orders=[]))

    def test_has_item(self, orders):
        assert orders.has_item(150.0)(customer(orders=[150.0]))
        assert not orders.has_item(150.0)(customer(orders=[15.0]))

    def test_any_and_all_items(self, orders):
        big = orders.any_item(lambda amount: amount > 100)
        small = orders.all_items(lambda amount: amount < 100)
        assert big(customer(orders=[20.0, 150.0]))
        assert not big(customer(orders=[20.0]))
        assert small(customer(orders=[20.0, 50.0]))
        assert small(customer(orders=[]))
        assert not small(customer(orders=[20.0, 150.0]))

    def test_element_predicate_may_be_a_specification(self, by_name):
        tags = Property.of(lambda p: p.tags)
        spec = tags.any_item(where(lambda t: t.startswith("sale")))
        lamp = by_name["Lamp"]
        lamp.tags = ["new", "sale-10"]
        assert spec(lamp)
        assert not spec(by_name["Desk"])

    def test_nested_items_explain(self, orders):
        assert orders.any_item(lambda amount: amount > 100).explain() == "any_match(orders, lambda item: item > 100)"
