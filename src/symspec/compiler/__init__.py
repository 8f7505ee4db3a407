from .compiler import COMPILED_PREDICATE, Compiler, compile_lambda, compile_specification

__all__ = [
    "COMPILED_PREDICATE",
    "Compiler",
    "compile_lambda",
    "compile_specification",
]
