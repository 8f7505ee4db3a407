"""
Shared fixtures for specification tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TypedDict

import pytest

from symspec import Specification, where

# ============================================================================
# Entity Types (diverse class types to validate specifications work with any class)
# ============================================================================


@dataclass
class Flags:
    """Dataclass entity with two switches."""

    a: bool
    b: bool


@dataclass
class Product:
    """Dataclass entity used by the catalog scenarios."""

    name: str
    price: float
    stock: int
    category: str
    tags: list[str] = field(default_factory=list)


class OrderCtx(TypedDict):
    """TypedDict entity type."""

    order_id: str
    total: float
    is_priority: bool


class Customer:
    """Plain class entity type."""

    def __init__(
        self,
        name: str | None,
        created_at: datetime,
        *,
        last_login: datetime | None = None,
        orders: list[float] | None = None,
    ):
        self.name = name
        self.created_at = created_at
        self.last_login = last_login
        self.orders = orders if orders is not None else []


CATALOG = [
    ("Laptop", 999, 10, "Electronics"),
    ("Phone", 599, 25, "Electronics"),
    ("Tablet", 399, 15, "Electronics"),
    ("Chair", 149, 50, "Furniture"),
    ("Desk", 299, 20, "Furniture"),
    ("Lamp", 49, 100, "Furniture"),
]


def names(specification: Specification[Product], products: list[Product]) -> list[str]:
    """Names of the products satisfying the specification, in catalog order."""
    return [p.name for p in products if specification.is_satisfied_by(p)]


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def products() -> list[Product]:
    """Fresh instances of the six catalog products."""
    return [Product(name, price, stock, category) for name, price, stock, category in CATALOG]


@pytest.fixture
def by_name(products: list[Product]) -> dict[str, Product]:
    return {p.name: p for p in products}


@pytest.fixture
def expensive() -> Specification[Product]:
    return where(lambda p: p.price > 200)


@pytest.fixture
def electronics() -> Specification[Product]:
    return where(lambda p: p.category == "Electronics")


@pytest.fixture
def low_stock() -> Specification[Product]:
    return where(lambda p: p.stock < 30)


# ============================================================================
# Boolean Fixtures
# ============================================================================


@pytest.fixture
def spec_a() -> Specification[Flags]:
    return where(lambda f: f.a)


@pytest.fixture
def spec_b() -> Specification[Flags]:
    return where(lambda f: f.b)


@pytest.fixture(params=[(True, True), (True, False), (False, True), (False, False)], ids=lambda p: f"a={p[0]},b={p[1]}")
def flags(request: pytest.FixtureRequest) -> Flags:
    """Every combination of the two switches."""
    return Flags(*request.param)
