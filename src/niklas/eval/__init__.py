"""Statement handlers and the expression evaluator for the Niklas runtime."""

__all__ = [
    "blocks",
    "common",
    "control",
    "decl",
    "expr",
    "fn",
    "helpers",
    "loops",
]
