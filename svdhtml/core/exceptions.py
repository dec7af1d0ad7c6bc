"""Custom exceptions used throughout the svdhtml package."""

from typing import Any, Optional

# Outermost element first when rendering the context path.
CONTEXT_ORDER = ("chip", "peripheral", "register", "field")


class SvdHtmlError(Exception):
    """Base exception for all svdhtml errors.

    All svdhtml-specific exceptions should inherit from this class.
    This allows catching every parse, layout and config failure with a
    single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.context: dict[str, str] = {}

    def add_context(self, **context: Optional[str]) -> "SvdHtmlError":
        """Attach the name of the element being processed.

        Called as the error unwinds through the parser and assembler, so the
        innermost caller wins when a key is already present.

        Returns:
            self, so callers can ``raise exc.add_context(...)``.
        """
        for key, value in context.items():
            if value is not None and key not in self.context:
                self.context[key] = value
        return self

    @property
    def location(self) -> str:
        """Dotted path of the offending element, e.g. ``UART0.CTRL.EN``."""
        parts = [self.context[key] for key in CONTEXT_ORDER if key in self.context]
        return ".".join(parts)

    def __str__(self) -> str:
        location = self.location
        if not location:
            return self.message
        return f"{self.message} (at {location})"


class ConfigurationError(SvdHtmlError):
    """Raised when there's an error in configuration.

    This includes:
    - Invalid configuration value
    - Unknown configuration key
    - Unreadable or malformed YAML
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class DocumentError(SvdHtmlError):
    """Base exception for problems in the source register-map document."""


class StructuralParseError(DocumentError):
    """Raised when the document violates the expected element structure.

    Examples:
    - XML that does not parse
    - Missing <device> or <peripherals> element
    - Two peripherals with the same name
    - A field bit range outside bits 0..31
    """


class MalformedNumber(DocumentError):
    """Raised when a numeric token is neither decimal, hex nor SVD binary."""

    def __init__(
        self,
        token: str,
        element: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        where = f" in <{element}>" if element else ""
        message = f"Malformed number {token!r}{where}"
        details = details or {}
        details["token"] = token
        super().__init__(message=message, details=details)
        self.token = token
        self.element = element


class MissingRequiredAttribute(DocumentError):
    """Raised when a peripheral, register, field or interrupt lacks a
    mandatory element such as its name, base address or offset."""

    def __init__(
        self,
        kind: str,
        attribute: str,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"{kind} is missing required <{attribute}>"
        super().__init__(message=message, details=details)
        self.kind = kind
        self.attribute = attribute


class UnresolvedDerivation(DocumentError):
    """Raised when derivedFrom names an unknown element or forms a cycle.

    ``kind`` is the element type: "peripheral", "register" or
    "enumeratedValues". Only peripherals are added to the error context
    here; the parser attaches register and field names as it unwinds.
    """

    def __init__(
        self,
        name: str,
        derived_from: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        kind: str = "peripheral",
    ):
        if message is None:
            message = (
                f"{kind[0].upper()}{kind[1:]} '{name}' is derived from unknown "
                f"{kind} '{derived_from}'"
            )
        super().__init__(message=message, details=details)
        self.name = name
        self.kind = kind
        self.derived_from = derived_from
        if kind == "peripheral":
            self.add_context(peripheral=name)


class LayoutError(SvdHtmlError):
    """Base exception for bit-layout failures."""


class OverlappingFields(LayoutError):
    """Raised when two fields of one register claim the same bit."""

    def __init__(
        self,
        first: str,
        second: str,
        bits: tuple[int, int],
        details: Optional[dict[str, Any]] = None,
    ):
        msb, lsb = bits
        span = f"{msb}" if msb == lsb else f"{msb}..{lsb}"
        message = f"Fields '{first}' and '{second}' overlap at bit {span}"
        details = details or {}
        details["bits"] = span
        super().__init__(message=message, details=details)
        self.first = first
        self.second = second
        self.bits = bits
