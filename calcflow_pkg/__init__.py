"""CalcFlow package: calculator modes, evaluator facade, theming and CLI."""

__all__ = [
    "config",
    "types",
    "logging_config",
    "parser",
    "evaluator",
    "history",
    "display",
    "keyboard",
    "sweep",
    "plotting",
    "matrix",
    "calculus",
    "themes",
    "app",
    "cli",
]
