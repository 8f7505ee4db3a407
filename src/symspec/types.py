from typing import Literal

NodeType = Literal[
    "var",
    "const",
    "member",
    "item",
    "call",
    "compare",
    "add",
    "and",
    "or",
    "not",
    "conditional",
    "lambda",
]
CompareOp = Literal["==", "!=", "<", "<=", ">", ">=", "in", "not in", "is", "is not"]
