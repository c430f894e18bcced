# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Convex Lisp front-end package.

Source text goes through `convex_lisp.parser.parse`, which returns a lossless
syntax tree plus diagnostics. The CLI entrypoint is `convex_lisp.cvxc:main`.
"""

__all__ = ["core", "parser"]
