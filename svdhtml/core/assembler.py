"""Page assembler.

Projects a resolved Chip into the view models the renderers consume: one
PeripheralPage per peripheral plus an IndexPage listing them. Everything a
template needs is precomputed here (hex text, access labels, span widths)
so rendering stays a pure projection.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from svdhtml.core.exceptions import DocumentError, LayoutError
from svdhtml.core.layout import Span, register_spans
from svdhtml.core.model import (
    Chip,
    EnumeratedValue,
    Field,
    Interrupt,
    Peripheral,
    Register,
)
from svdhtml.utils.config_loader import RenderConfig
from svdhtml.utils.consts import (
    ConstUtils,
    format_address,
    format_bit_range,
    format_offset,
)

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True)
class EnumeratedValueView:
    value: str
    name: str
    description: str


@dataclass(frozen=True)
class FieldView:
    """A field as listed under its register's table, in declaration order."""

    name: str
    bit_range: str
    access_label: str
    description: str
    enumerated_values: tuple[EnumeratedValueView, ...] = ()


@dataclass(frozen=True)
class SpanView:
    """One cell of the bit-range row; reserved spans have an empty name."""

    display_width: int
    msb: int
    lsb: int
    bit_range: str
    field_name: str
    access_label: str
    description: str
    enumerated_values: tuple[EnumeratedValueView, ...] = ()

    @property
    def is_reserved(self) -> bool:
        return not self.field_name

    @property
    def label_bit(self) -> int:
        """Bit under which the field name is written in the header row."""
        return self.lsb + self.display_width // 2


@dataclass(frozen=True)
class InterruptView:
    name: str
    value: int
    description: str


@dataclass(frozen=True)
class RegisterView:
    name: str
    description: str
    offset: int
    offset_hex: str
    address: int
    address_hex: str
    access_label: str
    reset_value_hex: str
    spans: tuple[SpanView, ...]
    fields: tuple[FieldView, ...]
    peripheral_name: str = ""

    @property
    def anchor(self) -> str:
        """Element id, qualified by peripheral so ids stay unique in one document."""
        if self.peripheral_name:
            return _anchor(f"{self.peripheral_name}.{self.name}")
        return _anchor(self.name)

    def header_cells(self) -> list[str]:
        """Field name per bit, 31 first, empty except at each field's label bit."""
        labels = {s.label_bit: s.field_name for s in self.spans if not s.is_reserved}
        return [labels.get(bit, "") for bit in range(ConstUtils.MSB, -1, -1)]


@dataclass(frozen=True)
class PeripheralPage:
    chip_name: str
    name: str
    description: str
    group_name: str
    derived_from: str
    base_address: int
    base_address_hex: str
    file_name: str
    interrupts: tuple[InterruptView, ...]
    registers: tuple[RegisterView, ...]

    @property
    def anchor(self) -> str:
        return _anchor(self.name)


@dataclass(frozen=True)
class IndexEntry:
    name: str
    base_address_hex: str
    description: str
    file_name: str
    anchor: str


@dataclass(frozen=True)
class IndexPage:
    chip_name: str
    title: str
    vendor: str
    description: str
    file_name: str
    entries: tuple[IndexEntry, ...]


@dataclass(frozen=True)
class Site:
    """Everything the renderers need for one chip."""

    index: IndexPage
    pages: tuple[PeripheralPage, ...]
    config: RenderConfig


def _anchor(name: str) -> str:
    return _UNSAFE_FILENAME.sub("_", name)


def _enum_views(
    values: tuple[EnumeratedValue, ...]
) -> tuple[EnumeratedValueView, ...]:
    return tuple(
        EnumeratedValueView(
            value="default" if ev.value is None else str(ev.value),
            name=ev.name,
            description=ev.description or "",
        )
        for ev in values
    )


def _span_view(span: Span, config: RenderConfig) -> SpanView:
    field = span.field
    if field is None:
        return SpanView(
            display_width=span.display_width,
            msb=span.msb,
            lsb=span.lsb,
            bit_range=span.bit_range,
            field_name="",
            access_label="",
            description="",
        )
    return SpanView(
        display_width=span.display_width,
        msb=span.msb,
        lsb=span.lsb,
        bit_range=span.bit_range,
        field_name=field.name,
        access_label=config.access_label(field.access),
        description=field.description or "",
        enumerated_values=_enum_views(field.enumerated_values),
    )


def _field_view(field: Field, config: RenderConfig) -> FieldView:
    return FieldView(
        name=field.name,
        bit_range=format_bit_range(field.msb, field.lsb),
        access_label=config.access_label(field.access),
        description=field.description or "",
        enumerated_values=_enum_views(field.enumerated_values),
    )


def assemble_register(
    register: Register,
    base_address: int,
    config: RenderConfig,
    peripheral_name: str = "",
) -> RegisterView:
    """Lay out one register and resolve its absolute address."""
    spans = register_spans(register)
    address = register.absolute_address(base_address)
    return RegisterView(
        name=register.title,
        description=register.description or "",
        offset=register.offset,
        offset_hex=format_offset(register.offset),
        address=address,
        address_hex=format_address(address),
        access_label=config.access_label(register.access),
        reset_value_hex=(
            "" if register.reset_value is None else format_address(register.reset_value)
        ),
        spans=tuple(_span_view(s, config) for s in spans),
        fields=tuple(_field_view(f, config) for f in register.fields),
        peripheral_name=peripheral_name,
    )


def _interrupt_view(irq: Interrupt) -> InterruptView:
    return InterruptView(
        name=irq.name, value=irq.value, description=irq.description or ""
    )


def page_file_name(peripheral: Peripheral, config: RenderConfig) -> str:
    return f"{_anchor(peripheral.name)}{config.page_suffix}"


def assemble_peripheral(
    chip: Chip, peripheral: Peripheral, config: RenderConfig
) -> PeripheralPage:
    """Build the page for one peripheral.

    Raises:
        LayoutError: from the layout engine, with the register and
            peripheral names attached.
    """
    registers: list[RegisterView] = []
    for reg in peripheral.registers:
        try:
            registers.append(
                assemble_register(reg, peripheral.base_address, config, peripheral.name)
            )
        except LayoutError as exc:
            raise exc.add_context(
                chip=chip.name, peripheral=peripheral.name, register=reg.name
            )

    return PeripheralPage(
        chip_name=chip.name,
        name=peripheral.name,
        description=peripheral.description or "",
        group_name=peripheral.group_name or "",
        derived_from=peripheral.derived_from or "",
        base_address=peripheral.base_address,
        base_address_hex=format_address(peripheral.base_address),
        file_name=page_file_name(peripheral, config),
        interrupts=tuple(_interrupt_view(i) for i in peripheral.interrupts),
        registers=tuple(registers),
    )


def _check_unique_file_names(chip: Chip, pages: tuple[PeripheralPage, ...]) -> None:
    """Peripheral names that differ only in unsafe characters share a file."""
    owners: dict[str, str] = {}
    for page in pages:
        if page.file_name in owners:
            raise DocumentError(
                f"Peripherals '{owners[page.file_name]}' and '{page.name}' "
                f"both map to output file '{page.file_name}'",
                details={"file_name": page.file_name},
            ).add_context(chip=chip.name)
        owners[page.file_name] = page.name


def ordered_peripherals(chip: Chip, config: RenderConfig) -> list[Peripheral]:
    peripherals = list(chip.peripherals)
    if config.sort_peripherals == "name":
        peripherals.sort(key=lambda p: p.name)
    elif config.sort_peripherals == "address":
        peripherals.sort(key=lambda p: (p.base_address, p.name))
    return peripherals


def assemble(chip: Chip, config: Optional[RenderConfig] = None) -> Site:
    """Build every view model for ``chip``.

    Args:
        chip: Resolved chip description.
        config: Render settings; defaults to RenderConfig().

    Returns:
        Site with one page per peripheral and the index.

    Raises:
        LayoutError: a register's fields overlap or leave the register.
        DocumentError: two peripherals would be written to the same file.
    """
    config = config or RenderConfig()

    pages = tuple(
        assemble_peripheral(chip, p, config) for p in ordered_peripherals(chip, config)
    )
    _check_unique_file_names(chip, pages)
    index = IndexPage(
        chip_name=chip.name,
        title=config.title or chip.name,
        vendor=chip.vendor or "",
        description=chip.description or "",
        file_name=config.index_name,
        entries=tuple(
            IndexEntry(
                name=page.name,
                base_address_hex=page.base_address_hex,
                description=page.description,
                file_name=page.file_name,
                anchor=page.anchor,
            )
            for page in pages
        ),
    )

    logger.info(
        "Assembled %d peripheral pages, %d registers",
        len(pages),
        sum(len(p.registers) for p in pages),
    )
    return Site(index=index, pages=pages, config=config)
