from .errs import EntityTypeMismatchError, ExpressionError, NotASymbolError, UnboundVariableError
from .evaluate import evaluate, evaluate_lambda
from .nodes import (
    Add,
    And,
    Call,
    Compare,
    Conditional,
    Const,
    Item,
    Lambda,
    Member,
    Node,
    Not,
    Or,
    Var,
    flatten_chain,
    is_node,
)
from .substitute import equivalent, free_variables, rebind, substitute, unify_variables
from .symbol import Symbol, as_node

__all__ = [
    "Add",
    "And",
    "Call",
    "Compare",
    "Conditional",
    "Const",
    "EntityTypeMismatchError",
    "ExpressionError",
    "Item",
    "Lambda",
    "Member",
    "Node",
    "Not",
    "NotASymbolError",
    "Or",
    "Symbol",
    "UnboundVariableError",
    "Var",
    "as_node",
    "equivalent",
    "evaluate",
    "evaluate_lambda",
    "flatten_chain",
    "free_variables",
    "is_node",
    "rebind",
    "substitute",
    "unify_variables",
]
