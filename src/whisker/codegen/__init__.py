"""Code generation — Elm IR, printer, and the routing-module emitter."""

from whisker.codegen.emitter import build_module, emit
from whisker.codegen.ir import Module, check_exhaustive
from whisker.codegen.printer import print_module

__all__ = [
    "Module",
    "build_module",
    "check_exhaustive",
    "emit",
    "print_module",
]
