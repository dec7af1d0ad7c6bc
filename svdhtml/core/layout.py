"""Bit layout of a register.

compute_spans() turns a register's fields into the sequence of table cells
drawn for it: bit 31 first, one Span per field, and one reserved Span for
every run of bits no field claims.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from svdhtml.core.exceptions import LayoutError, OverlappingFields
from svdhtml.core.model import Field, Register
from svdhtml.utils.consts import ConstUtils, format_bit_range


@dataclass(frozen=True)
class Span:
    """Contiguous bits msb..lsb, owned by ``field`` or reserved when None."""

    msb: int
    lsb: int
    field: Optional[Field] = None

    @property
    def width(self) -> int:
        return self.msb - self.lsb + 1

    @property
    def display_width(self) -> int:
        """Table columns to span: one per bit."""
        return self.width

    @property
    def is_reserved(self) -> bool:
        return self.field is None

    @property
    def bit_range(self) -> str:
        return format_bit_range(self.msb, self.lsb)

    @classmethod
    def reserved(cls, msb: int, lsb: int) -> "Span":
        return cls(msb=msb, lsb=lsb)


def sort_fields(fields: Iterable[Field]) -> list[Field]:
    """Highest bit offset first; equal offsets keep declaration order."""
    return sorted(fields, key=lambda f: -f.bit_offset)


def compute_spans(fields: Iterable[Field]) -> tuple[Span, ...]:
    """Lay out ``fields`` over bits 31..0.

    The widths of the returned spans always add up to 32.

    Raises:
        LayoutError: when a field lies outside bits 0..31.
        OverlappingFields: when a field claims a bit already taken by a
            field with a higher (or equal, earlier declared) offset.
    """
    spans: list[Span] = []
    # Highest bit not yet claimed.
    cursor = ConstUtils.MSB
    previous: Optional[Field] = None

    for field in sort_fields(fields):
        if field.lsb < 0 or field.msb > ConstUtils.MSB:
            raise LayoutError(
                f"Field '{field.name}' bits {field.msb}..{field.lsb} lie outside "
                f"a {ConstUtils.REGISTER_WIDTH}-bit register"
            ).add_context(field=field.name)
        if previous is not None and field.msb > cursor:
            raise OverlappingFields(
                previous.name,
                field.name,
                (min(field.msb, previous.msb), previous.lsb),
            )
        if field.msb < cursor:
            spans.append(Span.reserved(cursor, field.msb + 1))
        spans.append(Span(msb=field.msb, lsb=field.lsb, field=field))
        cursor = field.lsb - 1
        previous = field

    if cursor >= 0:
        spans.append(Span.reserved(cursor, 0))
    return tuple(spans)


def register_spans(register: Register) -> tuple[Span, ...]:
    """compute_spans() for a register, with the register named on failure."""
    try:
        return compute_spans(register.fields)
    except LayoutError as exc:
        raise exc.add_context(register=register.name)
