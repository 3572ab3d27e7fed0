"""
esflat.core: shared span/diagnostic types used across the pipeline.

Modules:
  - span: best-effort source location
  - diagnostics: Diagnostic record rendered by the CLI
"""

from .diagnostics import Diagnostic
from .span import Span

__all__ = ["Diagnostic", "Span"]
