"""Register-map document model.

A parsed chip description is a tree of frozen dataclasses:
Chip -> Peripheral -> Register -> Field -> EnumeratedValue, with Interrupts
hanging off each Peripheral. Everything is built once by the parser and is
read-only afterwards; collections are tuples so the whole tree is hashable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Access(Enum):
    """SVD access modes.

    The value is the token used in the document, the label is the short
    form shown in the register tables.
    """

    READ_ONLY = "read-only"
    """Read-only; writes have no effect."""

    WRITE_ONLY = "write-only"
    """Write-only; reads are undefined."""

    READ_WRITE = "read-write"
    """Readable and writable."""

    WRITE_ONCE = "writeOnce"
    """Write-only, only the first write after reset has an effect."""

    READ_WRITE_ONCE = "read-writeOnce"
    """Readable, only the first write after reset has an effect."""

    @property
    def label(self) -> str:
        return _ACCESS_LABELS[self]

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["Access"]:
        """Map a document token to an Access, None when absent.

        Raises:
            ValueError: for an unknown token.
        """
        if token is None:
            return None
        return cls(token.strip())


_ACCESS_LABELS = {
    Access.READ_ONLY: "R",
    Access.WRITE_ONLY: "W",
    Access.READ_WRITE: "RW",
    Access.WRITE_ONCE: "WO",
    Access.READ_WRITE_ONCE: "RWO",
}


@dataclass(frozen=True)
class EnumeratedValue:
    """One named value of a field.

    ``value`` is None for the ``isDefault`` entry that covers every value
    not listed explicitly.
    """

    name: str
    value: Optional[int]
    description: Optional[str] = None

    @property
    def is_default(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class Field:
    """A named contiguous bit range inside a register."""

    name: str
    bit_offset: int
    bit_width: int
    access: Optional[Access] = None
    description: Optional[str] = None
    enumerated_values: tuple[EnumeratedValue, ...] = ()

    @property
    def lsb(self) -> int:
        return self.bit_offset

    @property
    def msb(self) -> int:
        return self.bit_offset + self.bit_width - 1


@dataclass(frozen=True)
class Register:
    """A 32-bit register at ``offset`` bytes from its peripheral's base."""

    name: str
    offset: int
    access: Optional[Access] = None
    description: Optional[str] = None
    display_name: Optional[str] = None
    reset_value: Optional[int] = None
    dim: Optional[int] = None
    dim_increment: Optional[int] = None
    fields: tuple[Field, ...] = ()

    @property
    def title(self) -> str:
        """Name shown in headings; array registers show their index range."""
        return self.display_name or self.name

    def absolute_address(self, base_address: int) -> int:
        return base_address + self.offset


@dataclass(frozen=True)
class Interrupt:
    name: str
    value: int
    description: Optional[str] = None


@dataclass(frozen=True)
class Peripheral:
    """A hardware block with its registers fully resolved.

    ``derived_from`` is kept for display only; by the time a Peripheral
    exists its inherited registers have already been copied in.
    """

    name: str
    base_address: int
    description: Optional[str] = None
    group_name: Optional[str] = None
    derived_from: Optional[str] = None
    registers: tuple[Register, ...] = ()
    interrupts: tuple[Interrupt, ...] = ()

    def register(self, name: str) -> Optional[Register]:
        """Return the register called ``name``, or None."""
        for reg in self.registers:
            if reg.name == name:
                return reg
        return None


@dataclass(frozen=True)
class Chip:
    name: str
    vendor: Optional[str] = None
    description: Optional[str] = None
    peripherals: tuple[Peripheral, ...] = ()

    def peripheral(self, name: str) -> Optional[Peripheral]:
        """Return the peripheral called ``name``, or None."""
        for periph in self.peripherals:
            if periph.name == name:
                return periph
        return None
