"""CMSIS-SVD document parser.

Turns the XML register-map description into a fully resolved Chip. Parsing
runs in two passes: the first collects every <peripheral> element by name,
the second resolves ``derivedFrom`` references against that mapping, so a
peripheral may be declared before or after the one it derives from.

Registers and <enumeratedValues> blocks may also carry ``derivedFrom``;
those name an element defined earlier in the same peripheral (or, for
registers of a derived peripheral, one inherited from its base).
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence, TypeVar, Union

from svdhtml.core.exceptions import (
    DocumentError,
    MissingRequiredAttribute,
    StructuralParseError,
    UnresolvedDerivation,
)
from svdhtml.core.model import (
    Access,
    Chip,
    EnumeratedValue,
    Field,
    Interrupt,
    Peripheral,
    Register,
)
from svdhtml.utils.consts import ConstUtils
from svdhtml.utils.numbers import parse_bool, parse_int, parse_optional_int

logger = logging.getLogger(__name__)

_BIT_RANGE = re.compile(r"^\[\s*(\w+)\s*:\s*(\w+)\s*\]$")

_Named = TypeVar("_Named", Register, Field)


@dataclass(frozen=True)
class _RawPeripheral:
    """First-pass record: the element plus what resolution needs up front."""

    name: str
    derived_from: Optional[str]
    node: ET.Element


def _text(node: Optional[ET.Element], tag: str) -> Optional[str]:
    if node is None:
        return None
    e = node.find(tag)
    if e is None or e.text is None:
        return None
    return e.text.strip() or None


def _description(node: ET.Element) -> Optional[str]:
    """Descriptions are free text wrapped and indented in the XML."""
    raw = _text(node, "description")
    if raw is None:
        return None
    return " ".join(raw.split()) or None


def _require(node: ET.Element, tag: str, kind: str) -> str:
    value = _text(node, tag)
    if value is None:
        raise MissingRequiredAttribute(kind, tag)
    return value


def _access(node: ET.Element, default: Optional[Access]) -> Optional[Access]:
    token = _text(node, "access")
    if token is None:
        return default
    try:
        return Access.from_token(token)
    except ValueError as exc:
        raise StructuralParseError(
            f"Unknown access mode {token!r}", details={"access": token}
        ) from exc


@dataclass
class _Scope:
    """Registers and named enumeratedValues already defined in one peripheral.

    Register and enumeratedValues ``derivedFrom`` references are looked up
    here; a derived peripheral starts out with its base's registers.
    """

    registers: dict[str, Register] = dataclass_field(default_factory=dict)
    enums: dict[str, tuple[EnumeratedValue, ...]] = dataclass_field(default_factory=dict)

    def base_register(self, name: str, ref: str, prefix: str) -> Register:
        for key in (f"{prefix}{ref}", ref):
            if key in self.registers:
                return self.registers[key]
        raise UnresolvedDerivation(name, ref, kind="register")

    def base_enums(self, ref: str) -> tuple[EnumeratedValue, ...]:
        # References may be qualified (PERIPH.REG.FIELD.NAME); blocks are
        # looked up by their own <name>.
        for key in (ref, ref.rsplit(".", 1)[-1]):
            if key in self.enums:
                return self.enums[key]
        raise UnresolvedDerivation(
            ref,
            ref,
            message=f"enumeratedValues derived from unknown enumeratedValues '{ref}'",
            kind="enumeratedValues",
        )


def _merge_by_name(inherited: tuple[_Named, ...], own: Sequence[_Named]) -> tuple[_Named, ...]:
    """Copy ``inherited`` and replace entries by name with ``own``.

    A replacement takes the inherited entry's position; entries the base
    does not have are appended.
    """
    own_by_name = {item.name: item for item in own}
    merged = [own_by_name.pop(item.name, item) for item in inherited]
    merged.extend(item for item in own if item.name in own_by_name)
    return tuple(merged)


# Fields -----------------------------------------------------------------


def _bit_position(node: ET.Element) -> tuple[int, int]:
    """Return (bit_offset, bit_width) from any of the three SVD forms."""
    bit_offset = _text(node, "bitOffset")
    if bit_offset is not None:
        offset = parse_int(bit_offset, "bitOffset")
        width = parse_int(_text(node, "bitWidth") or "1", "bitWidth")
        return offset, width

    lsb, msb = _text(node, "lsb"), _text(node, "msb")
    if lsb is not None and msb is not None:
        low, high = parse_int(lsb, "lsb"), parse_int(msb, "msb")
        return low, high - low + 1

    bit_range = _text(node, "bitRange")
    if bit_range is not None:
        m = _BIT_RANGE.match(bit_range)
        if m is None:
            raise StructuralParseError(
                f"Malformed bitRange {bit_range!r}", details={"bitRange": bit_range}
            )
        high = parse_int(m.group(1), "bitRange")
        low = parse_int(m.group(2), "bitRange")
        return low, high - low + 1

    raise MissingRequiredAttribute("field", "bitOffset")


def _parse_enumerated_value(node: ET.Element) -> EnumeratedValue:
    if parse_bool(_text(node, "isDefault")):
        value = None
    else:
        value = parse_int(_require(node, "value", "enumeratedValue"), "value")
    return EnumeratedValue(
        name=_text(node, "name") or "", value=value, description=_description(node)
    )


def _parse_enumerated_values(node: ET.Element, scope: _Scope) -> tuple[EnumeratedValue, ...]:
    values: list[EnumeratedValue] = []
    # Separate <enumeratedValues> blocks for read and write usage are merged.
    for block in node.findall("enumeratedValues"):
        ref = block.get("derivedFrom")
        if ref is not None:
            block_values = scope.base_enums(ref)
        else:
            block_values = tuple(
                _parse_enumerated_value(ev) for ev in block.findall("enumeratedValue")
            )
        block_name = _text(block, "name")
        if block_name is not None:
            scope.enums[block_name] = block_values
        values.extend(block_values)
    return tuple(values)


def _parse_field(node: ET.Element, scope: _Scope) -> Field:
    name = _require(node, "name", "field")
    try:
        offset, width = _bit_position(node)
        if width < 1 or offset + width > ConstUtils.REGISTER_WIDTH:
            raise StructuralParseError(
                f"Bit range [{offset + width - 1}:{offset}] does not fit "
                f"in a {ConstUtils.REGISTER_WIDTH}-bit register",
                details={"bit_offset": offset, "bit_width": width},
            )
        return Field(
            name=name,
            bit_offset=offset,
            bit_width=width,
            access=_access(node, None),
            description=_description(node),
            enumerated_values=_parse_enumerated_values(node, scope),
        )
    except DocumentError as exc:
        raise exc.add_context(field=name)


# Registers ----------------------------------------------------------------


def _array_title(name: str, node: ET.Element, dim: Optional[int]) -> Optional[str]:
    """Heading for an array register, e.g. ``CH%s`` -> ``CH<0..3>``."""
    if dim is None or "%s" not in name:
        return None
    dim_index = _text(node, "dimIndex")
    indices = dim_index if dim_index else f"0..{dim - 1}"
    return name.replace("[%s]", f"[{indices}]").replace("%s", f"<{indices}>")


def _inherit_register(base: Register, own: Register) -> Register:
    """``own`` with unset values taken from ``base``.

    Fields are merged by name: a field declared on ``own`` replaces the
    base field in place, new ones are appended.
    """
    return replace(
        own,
        description=own.description or base.description,
        reset_value=base.reset_value if own.reset_value is None else own.reset_value,
        dim_increment=(
            base.dim_increment if own.dim_increment is None else own.dim_increment
        ),
        fields=_merge_by_name(base.fields, own.fields),
    )


def _parse_register(
    node: ET.Element,
    scope: _Scope,
    base_offset: int,
    prefix: str,
    default_access: Optional[Access],
) -> Register:
    name = _require(node, "name", "register")
    qualified = f"{prefix}{name}"
    try:
        ref = node.get("derivedFrom")
        base = scope.base_register(qualified, ref, prefix) if ref else None

        offset_text = _text(node, "addressOffset")
        if offset_text is not None:
            offset = base_offset + parse_int(offset_text, "addressOffset")
        elif base is not None:
            offset = base.offset
        else:
            raise MissingRequiredAttribute("register", "addressOffset")

        size = parse_optional_int(_text(node, "size"), "size")
        if size is not None and size != ConstUtils.REGISTER_WIDTH:
            logger.warning(
                "Register %s declares size %d; rendering as %d bits",
                qualified,
                size,
                ConstUtils.REGISTER_WIDTH,
            )
        dim = parse_optional_int(_text(node, "dim"), "dim")
        if dim is None and base is not None:
            dim = base.dim
        title = _array_title(name, node, dim)

        fields_node = node.find("fields")
        fields: tuple[Field, ...] = ()
        if fields_node is not None:
            fields = tuple(_parse_field(f, scope) for f in fields_node.findall("field"))

        reg = Register(
            name=qualified,
            offset=offset,
            access=_access(node, base.access if base else default_access),
            description=_description(node),
            display_name=f"{prefix}{title}" if title else None,
            reset_value=parse_optional_int(_text(node, "resetValue"), "resetValue"),
            dim=dim,
            dim_increment=parse_optional_int(_text(node, "dimIncrement"), "dimIncrement"),
            fields=fields,
        )
        if base is not None:
            logger.debug("Register %s derives from %s", qualified, base.name)
            reg = _inherit_register(base, reg)
    except DocumentError as exc:
        raise exc.add_context(register=qualified)

    scope.registers[qualified] = reg
    return reg


def _parse_register_block(
    node: Optional[ET.Element],
    scope: _Scope,
    base_offset: int = 0,
    prefix: str = "",
    default_access: Optional[Access] = None,
) -> list[Register]:
    """Flatten <register> and nested <cluster> elements in document order.

    Cluster members get the cluster's offset added and its name as a
    ``CLUSTER.`` prefix.
    """
    if node is None:
        return []
    regs: list[Register] = []
    for child in node:
        if child.tag == "register":
            regs.append(_parse_register(child, scope, base_offset, prefix, default_access))
        elif child.tag == "cluster":
            cname = _require(child, "name", "cluster")
            cname = cname.replace("[%s]", "").replace("%s", "")
            coffset = parse_int(_require(child, "addressOffset", "cluster"), "addressOffset")
            regs.extend(
                _parse_register_block(
                    child,
                    scope,
                    base_offset + coffset,
                    f"{prefix}{cname}.",
                    _access(child, default_access),
                )
            )
    return regs


# Peripherals -----------------------------------------------------------------


def _parse_interrupts(node: ET.Element) -> tuple[Interrupt, ...]:
    irqs: list[Interrupt] = []
    for irq in node.findall("interrupt"):
        name = _require(irq, "name", "interrupt")
        value = parse_int(_require(irq, "value", "interrupt"), "value")
        irqs.append(Interrupt(name=name, value=value, description=_description(irq)))
    return tuple(irqs)


class _Resolver:
    """Second pass: turns raw peripherals into Peripheral values."""

    def __init__(
        self, raw: dict[str, _RawPeripheral], default_access: Optional[Access]
    ):
        self._raw = raw
        self._default_access = default_access
        self._resolved: dict[str, Peripheral] = {}
        self._in_progress: list[str] = []

    def resolve(self, name: str) -> Peripheral:
        if name in self._resolved:
            return self._resolved[name]

        entry = self._raw[name]
        if name in self._in_progress:
            chain = " -> ".join([*self._in_progress, name])
            raise UnresolvedDerivation(
                name,
                entry.derived_from or name,
                message=f"Circular derivation: {chain}",
            )

        self._in_progress.append(name)
        try:
            periph = self._build(entry)
        except DocumentError as exc:
            raise exc.add_context(peripheral=name)
        finally:
            self._in_progress.pop()

        self._resolved[name] = periph
        return periph

    def _base(self, entry: _RawPeripheral) -> Optional[Peripheral]:
        if entry.derived_from is None:
            return None
        if entry.derived_from not in self._raw:
            raise UnresolvedDerivation(entry.name, entry.derived_from)
        return self.resolve(entry.derived_from)

    def _build(self, entry: _RawPeripheral) -> Peripheral:
        node = entry.node
        base_address = parse_int(
            _require(node, "baseAddress", "peripheral"), "baseAddress"
        )
        parent = self._base(entry)

        default_access = _access(node, self._default_access)
        scope = _Scope()
        if parent is not None:
            scope.registers.update((r.name, r) for r in parent.registers)
        own = _parse_register_block(
            node.find("registers"), scope, default_access=default_access
        )

        if parent is None:
            return Peripheral(
                name=entry.name,
                base_address=base_address,
                description=_description(node),
                group_name=_text(node, "groupName"),
                registers=tuple(own),
                interrupts=_parse_interrupts(node),
            )

        logger.debug(
            "%s derives from %s (%d own registers)",
            entry.name,
            parent.name,
            len(own),
        )
        return replace(
            parent,
            name=entry.name,
            base_address=base_address,
            description=_description(node) or parent.description,
            group_name=_text(node, "groupName") or parent.group_name,
            derived_from=parent.name,
            registers=_merge_by_name(parent.registers, own),
            interrupts=_parse_interrupts(node),
        )


def parse_device(root: ET.Element) -> Chip:
    """Build a Chip from the parsed <device> element.

    Raises:
        StructuralParseError: wrong root element, no <peripherals>, or a
            duplicate peripheral name.
        MissingRequiredAttribute: a mandatory child element is absent.
        MalformedNumber: a numeric element does not parse.
        UnresolvedDerivation: derivedFrom names an unknown peripheral,
            register or enumeratedValues block, or peripherals form a cycle.
    """
    if root.tag != "device":
        raise StructuralParseError(f"Expected <device> root element, got <{root.tag}>")

    chip_name = _require(root, "name", "device")
    perips_node = root.find("peripherals")
    if perips_node is None:
        raise StructuralParseError(
            "Missing <peripherals> element"
        ).add_context(chip=chip_name)

    try:
        # ---- first pass: collect peripherals by name
        raw: dict[str, _RawPeripheral] = {}
        for p in perips_node.findall("peripheral"):
            pname = _require(p, "name", "peripheral")
            if pname in raw:
                raise StructuralParseError(
                    f"Duplicate peripheral '{pname}'"
                ).add_context(peripheral=pname)
            raw[pname] = _RawPeripheral(
                name=pname, derived_from=p.get("derivedFrom"), node=p
            )

        # ---- second pass: resolve derivations in document order
        resolver = _Resolver(raw, _access(root, None))
        peripherals = tuple(resolver.resolve(name) for name in raw)
    except DocumentError as exc:
        raise exc.add_context(chip=chip_name)

    chip = Chip(
        name=chip_name,
        vendor=_text(root, "vendor"),
        description=_description(root),
        peripherals=peripherals,
    )
    logger.info("Loaded SVD device=%s peripherals=%d", chip.name, len(peripherals))
    return chip


def parse_svd(source: Union[str, bytes]) -> Chip:
    """Parse an SVD document held in memory."""
    try:
        root = ET.fromstring(source)
    except ET.ParseError as exc:
        raise StructuralParseError(f"Malformed XML: {exc}") from exc
    return parse_device(root)


def load_svd(path: Path) -> Chip:
    """Parse the SVD file at ``path``."""
    logger.debug("Reading %s", path)
    try:
        tree = ET.parse(path)
    except ET.ParseError as exc:
        raise StructuralParseError(
            f"Malformed XML in {path}: {exc}", details={"path": str(path)}
        ) from exc
    except OSError as exc:
        raise DocumentError(
            f"Cannot read {path}: {exc}", details={"path": str(path)}
        ) from exc
    return parse_device(tree.getroot())
