"""Helpers for loading and validating render configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml  # type: ignore[import-untyped]

from svdhtml.core.exceptions import ConfigurationError
from svdhtml.core.model import Access
from svdhtml.utils.consts import ConstUtils

SortOrder = Literal["document", "name", "address"]

_SORT_ORDERS = ("document", "name", "address")
_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"


@dataclass(frozen=True)
class RenderConfig:
    title: Optional[str] = None
    renderer: str = "pages"
    sort_peripherals: SortOrder = "document"
    index_name: str = "index.html"
    page_suffix: str = ".html"
    show_bit_numbers: bool = True
    access_labels: dict[Access, str] = field(default_factory=dict)

    def access_label(self, access: Optional[Access]) -> str:
        """Label for a field's access mode; "-" when the field has none."""
        if access is None:
            return ConstUtils.NO_ACCESS_LABEL
        return self.access_labels.get(access, access.label)


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except Exception as exc:
        raise ConfigurationError(f"Failed to parse config: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    return raw


def _build_access_labels(raw: Any) -> dict[Access, str]:
    if not isinstance(raw, dict):
        raise ConfigurationError("access_labels", "must be a mapping")
    labels: dict[Access, str] = {}
    for token, label in raw.items():
        try:
            labels[Access(token)] = str(label)
        except ValueError as exc:
            raise ConfigurationError(
                "access_labels", f"unknown access mode {token!r}"
            ) from exc
    return labels


def _parse_render_cfg_from_dict(raw: dict[str, Any]) -> RenderConfig:
    known = set(RenderConfig.__dataclass_fields__)
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(unknown[0], "unknown configuration key")

    values = dict(raw)
    if "access_labels" in values:
        values["access_labels"] = _build_access_labels(values["access_labels"])

    try:
        cfg = RenderConfig(**values)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    _validate_render_config(cfg)
    return cfg


def _validate_render_config(cfg: RenderConfig) -> None:
    """Basic sanity checks so a bad config fails before anything is parsed."""
    if cfg.sort_peripherals not in _SORT_ORDERS:
        raise ConfigurationError(
            "sort_peripherals", f"must be one of {', '.join(_SORT_ORDERS)}"
        )
    if not isinstance(cfg.show_bit_numbers, bool):
        raise ConfigurationError("show_bit_numbers", "must be true or false")
    for key in ("renderer", "index_name", "page_suffix"):
        value = getattr(cfg, key)
        if not isinstance(value, str) or not value:
            raise ConfigurationError(key, "must be a non-empty string")
    if "/" in cfg.index_name or "\\" in cfg.index_name:
        raise ConfigurationError("index_name", "must be a plain file name")
    if cfg.title is not None and not isinstance(cfg.title, str):
        raise ConfigurationError("title", "must be a string")


def load_config(path: Optional[Union[str, Path]] = None) -> RenderConfig:
    """Load and validate render configuration.

    The bundled svdhtml/config.yaml supplies every default; keys found in
    ``path`` replace them. ``access_labels`` is merged key by key.

    Args:
        path: Optional user YAML file.

    Returns:
        RenderConfig instance

    Raises:
        ConfigurationError: on parse or validation errors
    """
    defaults = _load_yaml_file(_DEFAULT_CONFIG_PATH)
    raw = dict(defaults)
    if path is not None:
        user = _load_yaml_file(Path(path))
        raw.update(user)
        if isinstance(user.get("access_labels"), dict):
            raw["access_labels"] = {
                **defaults.get("access_labels", {}),
                **user["access_labels"],
            }

    return _parse_render_cfg_from_dict(raw=raw)
