"""Core modules for einloop."""

__all__ = [
    "evaluator",
    "exceptions",
    "ir",
    "odometer",
    "operands",
    "parser",
    "projector",
    "shape_checker",
    "stats",
]
