"""
convex_lisp.core: shared types used by the lexer, parser and CLI.

Modules:
  - span: source ranges (offsets plus line/column)
  - diagnostics: Diagnostic records and error kinds
  - builtins: the injected builtin-identifier registry
"""

__all__ = [
    "span",
    "diagnostics",
    "builtins",
]
