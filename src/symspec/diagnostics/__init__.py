from .explainer import SpecificationExplainer, detailed_result, evaluate_with_trace, evaluation_result, explain
from .result import EvaluationDetail, EvaluationResult
from .style import DefaultTraceStyle, RichTraceStyle, TraceStyle

__all__ = [
    "DefaultTraceStyle",
    "EvaluationDetail",
    "EvaluationResult",
    "RichTraceStyle",
    "SpecificationExplainer",
    "TraceStyle",
    "detailed_result",
    "evaluate_with_trace",
    "evaluation_result",
    "explain",
]
