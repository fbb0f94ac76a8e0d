"""
Codec configuration.

A YAML file fixes the normalization convention, the decimal precision and
the curve order of a deployment. Producer and consumer must load the same
values; the encoded bytes do not record them.

Example config.yaml:

    normalization: geographic   # geographic | wrap | cartesian
    precision: 7
    curve_order: 31
    # cartesian only:
    # x_extent: 1000.0
    # y_extent: 1000.0
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

import yaml

from .curve import CURVE_ORDER, MAX_CURVE_ORDER, CurveCodec, HilbertCurveMapping, grid_cells
from .errors import ConfigurationError
from .normalize import NORMALIZATIONS, PRECISION, get_normalizer


@dataclass(frozen=True)
class HilbertConfig:
    normalization: str = "geographic"
    precision: int = PRECISION
    curve_order: int = CURVE_ORDER
    x_extent: Optional[float] = None
    y_extent: Optional[float] = None


_KNOWN_KEYS = {f.name for f in fields(HilbertConfig)}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_config(raw: dict) -> None:
    """Check a raw config mapping and raise one error listing every problem."""
    errors: list[str] = []

    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        errors.append(f"Unknown keys: {unknown}")

    mode = raw.get("normalization", "geographic")
    if mode not in NORMALIZATIONS:
        errors.append(
            f"Invalid normalization: '{mode}'. Valid: {list(NORMALIZATIONS)}"
        )

    precision = raw.get("precision", PRECISION)
    if not isinstance(precision, int) or isinstance(precision, bool) or not 0 <= precision <= 15:
        errors.append(f"precision must be an integer in [0, 15], got {precision!r}")

    order = raw.get("curve_order", CURVE_ORDER)
    if not isinstance(order, int) or isinstance(order, bool) or not 1 <= order <= MAX_CURVE_ORDER:
        errors.append(f"curve_order must be an integer in [1, {MAX_CURVE_ORDER}], got {order!r}")

    for key in ("x_extent", "y_extent"):
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            errors.append(f"{key} must be a positive number, got {value!r}")

    if mode == "cartesian" and raw.get("x_extent") is None:
        errors.append("cartesian normalization requires x_extent")

    if errors:
        raise ConfigurationError("Invalid configuration:\n  - " + "\n  - ".join(errors))


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def config_from_dict(raw: Optional[dict]) -> HilbertConfig:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration must be a mapping, got {type(raw).__name__}")
    validate_config(raw)
    return HilbertConfig(**raw)


def load_config(path: Union[str, Path]) -> Optional[HilbertConfig]:
    """Read a YAML config file. Returns None if the file does not exist."""
    path = Path(path)
    if not path.exists():
        return None
    with open(path, "r") as f:
        return config_from_dict(yaml.safe_load(f))


def build_codec(config: Optional[HilbertConfig] = None) -> CurveCodec:
    """Create the curve codec described by a config (defaults when None)."""
    if config is None:
        config = HilbertConfig()

    normalizer = get_normalizer(
        config.normalization,
        precision=config.precision,
        x_extent=config.x_extent,
        y_extent=config.y_extent,
    )
    mapping = HilbertCurveMapping(config.curve_order, grid_cells(normalizer, config.curve_order))
    return CurveCodec(normalizer, mapping)
