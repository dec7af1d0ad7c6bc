"""Constants and formatting helpers shared by the core and the renderers."""


class ConstUtils:
    """Register geometry and display constants."""

    REGISTER_WIDTH = 32
    """Every register is rendered as 32 bits, little-endian."""

    MSB = REGISTER_WIDTH - 1
    """Most significant bit position: 31."""

    ADDRESS_DIGITS = 8
    """Hex digits used for absolute addresses (0x40000004)."""

    OFFSET_DIGITS = 4
    """Hex digits used for register offsets (0x0004)."""

    NO_ACCESS_LABEL = "-"
    """Label rendered for a field without an access mode."""


def format_address(address: int) -> str:
    """Format an absolute address as 0x%08X."""
    return f"0x{address:0{ConstUtils.ADDRESS_DIGITS}X}"


def format_offset(offset: int) -> str:
    """Format a register offset as 0x%04X."""
    return f"0x{offset:0{ConstUtils.OFFSET_DIGITS}X}"


def format_bit_range(msb: int, lsb: int) -> str:
    """Label for a bit range: "7 - 4" for several bits, "3" for one."""
    if msb == lsb:
        return str(msb)
    return f"{msb} - {lsb}"
