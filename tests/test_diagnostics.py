"""
Test suite for explanation and traced evaluation.
"""

from __future__ import annotations

import pytest

from symspec import EvaluationResult, RichTraceStyle, evaluate_with_trace, exactly, explain, satisfies, where
from symspec.diagnostics import DefaultTraceStyle, EvaluationDetail, SpecificationExplainer
from symspec.expr import Add, And, Call, Compare, Conditional, Const, Item, Lambda, Member, Var

from .conftest import Product


def is_discounted(product: Product) -> bool:
    return "sale" in product.tags


class TestExplain:
    def test_comparison(self, expensive):
        assert expensive.explain() == "price > 200"

    def test_string_constants_are_quoted(self, electronics):
        assert explain(electronics) == "category == 'Electronics'"

    def test_logic_is_parenthesised(self, expensive, electronics):
        assert (expensive & electronics).explain() == "(price > 200) AND (category == 'Electronics')"
        assert (expensive | ~electronics).explain() == "(price > 200) OR (NOT (category == 'Electronics'))"

    def test_xor_expansion(self, spec_a, spec_b):
        assert (spec_a ^ spec_b).explain() == "((a) AND (NOT (b))) OR ((NOT (a)) AND (b))"

    def test_method_calls_and_nested_members(self):
        spec = where(lambda c: c.address.city.startswith("Ber", 0))
        assert spec.explain() == "address.city.startswith('Ber', 0)"

    def test_opaque_call(self):
        assert satisfies(is_discounted).explain() == "is_discounted(entity)"

    def test_keyword_arguments(self):
        def is_cheaper_than(product: Product, *, limit: float) -> bool:
            return product.price < limit

        assert satisfies(is_cheaper_than, limit=100).explain() == "is_cheaper_than(entity, limit=100)"

    def test_item_access(self):
        spec = where(lambda o: o["total"] >= 100)
        assert spec.explain() == "total >= 100"
        x = Var("o")
        assert explain(Item(Member(x, "lines"), Const(0))) == "lines[0]"

    def test_conditional_and_lambda(self):
        x = Var("p")
        node = Conditional(Member(x, "active"), Const(1), Const(0))
        assert explain(node) == "IF (active) THEN 1 ELSE 0"
        assert explain(Lambda(x, Member(x, "active"))) == "lambda p: active"

    def test_nested_comparison_keeps_its_grouping(self):
        x = Var("p")
        node = Compare("==", Compare("<", Member(x, "price"), Const(100)), Const(True))
        assert explain(node) == "(price < 100) == True"
        assert explain(Compare("!=", Const(False), node)) == "False != ((price < 100) == True)"

    def test_boolean_operand_of_comparison_is_parenthesised(self):
        x = Var("f")
        node = Compare("==", And(Member(x, "a"), Member(x, "b")), Const(False))
        assert explain(node) == "((a) AND (b)) == False"

    def test_right_nested_sum_keeps_its_grouping(self):
        x = Var("p")
        assert explain(Add(Member(x, "a"), Add(Member(x, "b"), Const(1)))) == "a + (b + 1)"
        assert explain(Add(Add(Member(x, "a"), Member(x, "b")), Const(1))) == "a + b + 1"

    def test_explain_does_not_evaluate(self):
        calls: list[Product] = []

        def spy(product: Product) -> bool:
            calls.append(product)
            return True

        satisfies(spy).explain()
        assert calls == []


class TestEvaluateWithTrace:
    """One entry per evaluated non-boolean node, in left to right order."""

    def test_failures_record_actual_value(self, by_name, expensive, electronics):
        passed, details = evaluate_with_trace(expensive & electronics, by_name["Chair"])
        assert passed is False
        assert details == (
            EvaluationDetail(condition="price > 200", passed=False, actual=149),
            EvaluationDetail(condition="category == 'Electronics'", passed=False, actual="Furniture"),
        )

    def test_both_sides_are_evaluated_by_default(self, by_name, expensive, electronics):
        _, details = evaluate_with_trace(expensive | electronics, by_name["Laptop"])
        assert [d.passed for d in details] == [True, True]

    def test_short_circuit_option(self, by_name, expensive, electronics):
        passed, details = evaluate_with_trace(expensive & electronics, by_name["Chair"], short_circuit=True)
        assert passed is False
        assert [d.condition for d in details] == ["price > 200"]

        passed, details = evaluate_with_trace(expensive | electronics, by_name["Laptop"], short_circuit=True)
        assert passed is True
        assert len(details) == 1

    def test_not_adds_no_entry(self, by_name, electronics):
        passed, details = evaluate_with_trace(~electronics, by_name["Lamp"])
        assert passed is True
        assert details == (EvaluationDetail(condition="category == 'Electronics'", passed=False, actual="Furniture"),)

    def test_passed_comparisons_carry_no_actual(self, by_name, expensive):
        _, (detail,) = evaluate_with_trace(expensive, by_name["Laptop"])
        assert detail.passed
        assert detail.actual is None

    def test_non_comparison_leaves(self, by_name):
        passed, details = evaluate_with_trace(satisfies(is_discounted), by_name["Desk"])
        assert passed is False
        assert details == (EvaluationDetail(condition="is_discounted(entity)", passed=False),)

    def test_counting_combinator_is_one_entry(self, by_name, expensive, electronics):
        passed, details = evaluate_with_trace(exactly(1, expensive, electronics), by_name["Desk"])
        assert passed is True
        assert len(details) == 1

    def test_trace_agrees_with_evaluation(self, products, expensive, electronics, low_stock):
        spec = (expensive ^ electronics).implies(low_stock)
        for product in products:
            assert evaluate_with_trace(spec, product)[0] is spec(product)

    def test_errors_propagate(self, by_name):
        spec = where(lambda p: p.weight > 1)
        with pytest.raises(AttributeError):
            evaluate_with_trace(spec, by_name["Lamp"])

    def test_accepts_a_lambda(self, by_name):
        x = Var()
        lam = Lambda(x, Call("isupper", target=Member(x, "name")))
        assert evaluate_with_trace(lam, by_name["Lamp"]) == (
            False,
            (EvaluationDetail(condition="name.isupper()", passed=False),),
        )


class TestEvaluationResult:
    def test_evaluate_returns_result(self, by_name, expensive, electronics):
        result = (expensive & electronics).evaluate(by_name["Desk"])
        assert isinstance(result, EvaluationResult)
        assert not result
        assert result.summary == "FAILED"
        assert result.passed_conditions() == ("price > 200",)
        assert result.failure_reasons() == ("category == 'Electronics': FAILED (actual: 'Furniture')",)

    def test_default_rendering(self, by_name, expensive, electronics):
        assert (expensive & electronics).detailed_result(by_name["Desk"]) == (
            "Result: FAILED\n"
            "Details:\n"
            "  - price > 200: PASSED\n"
            "  - category == 'Electronics': FAILED (actual: 'Furniture')"
        )

    def test_custom_indent(self, by_name, expensive):
        rendered = expensive.evaluate(by_name["Laptop"]).render(DefaultTraceStyle(indent="\t"))
        assert rendered == "Result: PASSED\nDetails:\n\t- price > 200: PASSED"

    def test_rich_rendering(self, by_name, expensive, electronics):
        rendered = (expensive & electronics).detailed_result(by_name["Desk"], style=RichTraceStyle())
        assert rendered.splitlines()[0] == "Result: FAILED"
        assert "price > 200: PASSED" in rendered
        assert "category == 'Electronics': FAILED (actual: 'Furniture')" in rendered
        assert "\x1b[" not in rendered

    def test_result_is_frozen(self, by_name, expensive):
        result = expensive.evaluate(by_name["Laptop"])
        with pytest.raises(ValueError, match="frozen"):
            result.is_satisfied = False

    def test_str_uses_default_style(self, by_name, expensive):
        result = expensive.evaluate(by_name["Lamp"])
        assert str(result) == "Result: FAILED\nDetails:\n  - price > 200: FAILED (actual: 49)"


class TestSpecificationExplainer:
    def test_bundles_operations(self, by_name, expensive, electronics):
        explainer = SpecificationExplainer(expensive & electronics, short_circuit=True)
        assert explainer.explain() == "(price > 200) AND (category == 'Electronics')"
        assert explainer.evaluate(by_name["Chair"]).failure_reasons() == ("price > 200: FAILED (actual: 149)",)
