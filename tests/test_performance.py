"""
Test suite for cached and memoized specifications, including concurrent use.
"""

from __future__ import annotations

import gc
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from symspec import CachedSpecification, MemoizedSpecification, cached, memoized, satisfies
from symspec.performance import caching

from .conftest import Product


class Counter:
    """Opaque predicate that counts its calls."""

    def __init__(self, predicate):
        self.predicate = predicate
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, entity) -> bool:
        with self._lock:
            self.calls += 1
        return self.predicate(entity)


class TestCached:
    def test_agrees_with_inner(self, products, expensive, electronics, low_stock):
        spec = (expensive ^ electronics) | low_stock.nor(expensive)
        fast = cached(spec)
        assert [fast(p) for p in products] == [spec(p) for p in products]

    def test_compilation_is_lazy(self, expensive):
        spec = cached(expensive)
        assert spec._compiled is None
        spec(Product("Laptop", 999, 10, "Electronics"))
        assert spec._compiled is not None

    def test_closure_is_compiled_once(self, expensive, by_name):
        spec = cached(expensive)
        first = spec.compiled_predicate
        spec(by_name["Lamp"])
        assert spec.compiled_predicate is first

    def test_is_idempotent(self, expensive):
        spec = cached(expensive)
        assert cached(spec) is spec
        assert spec.cached() is spec
        assert isinstance(expensive.cached(), CachedSpecification)

    def test_symbolic_form_is_captured(self, expensive):
        spec = cached(expensive)
        assert spec.to_symbolic() is spec.to_symbolic()
        assert spec.explain() == "price > 200"

    def test_composes_like_any_specification(self, by_name, expensive, electronics):
        spec = cached(expensive) & electronics
        assert spec(by_name["Phone"])
        assert not spec(by_name["Desk"])

    def test_concurrent_first_use_compiles_once(self, monkeypatch, expensive, products):
        compiled_count = 0
        lock = threading.Lock()
        original = caching.compile_lambda

        def slow_compile(lam):
            nonlocal compiled_count
            with lock:
                compiled_count += 1
            time.sleep(0.05)
            return original(lam)

        monkeypatch.setattr(caching, "compile_lambda", slow_compile)

        spec = cached(expensive)
        workers = 8
        barrier = threading.Barrier(workers)

        def evaluate_all():
            barrier.wait()
            return [spec(p) for p in products]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda _: evaluate_all(), range(workers)))

        assert compiled_count == 1
        expected = [expensive(p) for p in products]
        assert all(result == expected for result in results)

    def test_logs_materialization(self, caplog, expensive, by_name):
        spec = cached(expensive)
        with caplog.at_level("DEBUG", logger="symspec"):
            spec(by_name["Desk"])
        assert any("Materializing compiled predicate" in record.getMessage() for record in caplog.records)


class TestMemoized:
    def test_result_is_stable(self, by_name, expensive):
        spec = memoized(expensive)
        laptop = by_name["Laptop"]
        assert spec(laptop) is spec(laptop) is True

    def test_inner_is_evaluated_once_per_entity(self, products):
        counter = Counter(lambda p: p.price > 200)
        spec = memoized(satisfies(counter))
        for _ in range(3):
            for product in products:
                spec(product)
        assert counter.calls == len(products)
        assert spec.cache_size == len(products)

    def test_first_result_is_kept_after_mutation(self, by_name, expensive):
        spec = memoized(expensive)
        lamp = by_name["Lamp"]
        assert spec(lamp) is False
        lamp.price = 5000
        assert spec(lamp) is False
        assert expensive(lamp) is True

    def test_entries_go_away_with_their_entity(self, expensive):
        spec = memoized(expensive)
        product = Product("Temp", 500, 1, "Garden")
        assert spec(product)
        assert spec.cache_size == 1
        del product
        gc.collect()
        assert spec.cache_size == 0

    def test_identity_not_equality(self):
        counter = Counter(lambda p: p.price > 200)
        spec = memoized(satisfies(counter))
        spec(Product("Same", 300, 1, "Garden"))
        twin = Product("Same", 300, 1, "Garden")
        spec(twin)
        assert counter.calls == 2

    @pytest.mark.parametrize("entity", [{"price": 300}, 300, None], ids=["dict", "int", "none"])
    def test_non_weakrefable_entities_bypass_the_cache(self, entity):
        counter = Counter(lambda e: e is not None)
        spec = memoized(satisfies(counter))
        spec(entity)
        spec(entity)
        assert counter.calls == 2
        assert spec.cache_size == 0

    def test_clear(self, products, expensive):
        spec = memoized(expensive)
        for product in products:
            spec(product)
        spec.clear()
        assert spec.cache_size == 0

    def test_is_idempotent(self, expensive):
        spec = memoized(expensive)
        assert memoized(spec) is spec
        assert isinstance(expensive.memoized(), MemoizedSpecification)
        assert spec.to_symbolic() is not None

    def test_concurrent_use(self, products):
        counter = Counter(lambda p: p.stock < 30)
        spec = memoized(satisfies(counter))
        workers = 8
        barrier = threading.Barrier(workers)

        def evaluate_all():
            barrier.wait()
            return [spec(p) for p in products for _ in range(50)]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda _: evaluate_all(), range(workers)))

        expected = [p.stock < 30 for p in products for _ in range(50)]
        assert all(result == expected for result in results)
        assert spec.cache_size == len(products)
        # Racing threads may each compute a result, but never more than once per thread.
        assert len(products) <= counter.calls <= len(products) * workers
