"""Benchmarks for specification evaluation."""

from __future__ import annotations

import pytest

from symspec import Specification, cached, exactly, memoized, where

from .conftest import CATALOG, Product


@pytest.fixture
def catalog() -> list[Product]:
    return [Product(name, price, stock, category) for name, price, stock, category in CATALOG] * 50


@pytest.fixture
def complex_spec() -> Specification[Product]:
    """((expensive AND electronics) OR furniture) AND NOT out of stock, plus a counting rule."""
    expensive = where(lambda p: p.price > 200)
    electronics = where(lambda p: p.category == "Electronics")
    furniture = where(lambda p: p.category == "Furniture")
    out_of_stock = where(lambda p: p.stock == 0)
    low_stock = where(lambda p: p.stock < 30)

    return ((expensive & electronics) | furniture).and_not(out_of_stock) & exactly(2, expensive, electronics, low_stock)


@pytest.mark.benchmark
def test_interpreted_evaluation(complex_spec: Specification[Product], catalog: list[Product]) -> None:
    """Benchmark evaluation through the combinator tree."""
    for product in catalog:
        complex_spec(product)


@pytest.mark.benchmark
def test_compiled_evaluation(complex_spec: Specification[Product], catalog: list[Product]) -> None:
    """Benchmark evaluation through the compiled closure."""
    spec = cached(complex_spec)
    for product in catalog:
        spec(product)


@pytest.mark.benchmark
def test_memoized_evaluation(complex_spec: Specification[Product], catalog: list[Product]) -> None:
    """Benchmark repeated evaluation of the same instances."""
    spec = memoized(complex_spec)
    for _ in range(5):
        for product in catalog:
            spec(product)


@pytest.mark.benchmark
def test_deep_composition() -> None:
    """Benchmark building and compiling a long AND chain."""
    spec = where(lambda p: p.price > 0)
    for i in range(100):
        spec = spec & where(lambda p, i=i: p.stock > -i - 1)
    spec.compile()(Product("a", 1, 0, "c"))
