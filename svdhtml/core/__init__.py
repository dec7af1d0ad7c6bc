"""Core modules for svdhtml.

Pipeline from document to view models:
- exceptions: error hierarchy with element context
- model: Chip/Peripheral/Register/Field document model
- parser: CMSIS-SVD XML -> model, with derivedFrom resolution
- layout: register fields -> bit spans
- assembler: model -> per-peripheral view models

Only the dependency-free modules are re-exported here; parser and assembler
pull in svdhtml.utils and are imported from their own modules.
"""

from svdhtml.core.exceptions import (
    ConfigurationError,
    DocumentError,
    LayoutError,
    MalformedNumber,
    MissingRequiredAttribute,
    OverlappingFields,
    StructuralParseError,
    SvdHtmlError,
    UnresolvedDerivation,
)
from svdhtml.core.layout import Span, compute_spans
from svdhtml.core.model import (
    Access,
    Chip,
    EnumeratedValue,
    Field,
    Interrupt,
    Peripheral,
    Register,
)

__all__ = [
    # Document model
    "Access",
    "Chip",
    "EnumeratedValue",
    "Field",
    "Interrupt",
    "Peripheral",
    "Register",
    # Layout
    "Span",
    "compute_spans",
    # Errors
    "SvdHtmlError",
    "ConfigurationError",
    "DocumentError",
    "LayoutError",
    "MalformedNumber",
    "MissingRequiredAttribute",
    "OverlappingFields",
    "StructuralParseError",
    "UnresolvedDerivation",
]
