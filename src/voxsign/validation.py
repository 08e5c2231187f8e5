"""Request validation for sign generation.

Requests arrive as plain mappings (parsed JSON or YAML). Field names may use
the camelCase wire names of the web form (``hangingSignThickness``), the
short names (``thickness``) or the Python attribute names
(``hanging_width``). All constraint violations are collected and reported
together in a single :class:`ValidationError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional

from voxsign.params import (
    HANGING_WIDTHS,
    MIN_SIGN_SIZE,
    IconPosition,
    PixelBitmap,
    SignSpecification,
    SignType,
)

logger = logging.getLogger(__name__)

# Wire and short names accepted for each SignSpecification field.
FIELD_ALIASES: Dict[str, str] = {
    "signType": "sign_type",
    "frameWidth": "frame_width",
    "hangingWidth": "hanging_width",
    "hangingIconPosition": "icon_position",
    "iconPosition": "icon_position",
    "hangingSignThickness": "thickness",
    "hangingSignIconOffsetX": "icon_offset_x",
    "iconOffsetX": "icon_offset_x",
    "hangingSignTextOffsetX": "text_offset_x",
    "textOffsetX": "text_offset_x",
    "signIconScale": "icon_scale",
    "iconScale": "icon_scale",
    "signIconOffsetY": "icon_offset_y",
    "iconOffsetY": "icon_offset_y",
    "textOffsetY": "text_offset_y",
    "signWithIcon": "with_icon",
    "withIcon": "with_icon",
}

_FIELD_NAMES = {f.name for f in fields(SignSpecification)}


@dataclass
class FieldError:
    """A single violated field constraint."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationError(ValueError):
    """Raised when a sign request violates one or more field constraints."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        lines = ["Invalid sign request:"]
        lines.extend(f"  - {err}" for err in self.errors)
        super().__init__("\n".join(lines))

    @property
    def fields(self) -> List[str]:
        return [err.path for err in self.errors]


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map request keys onto :class:`SignSpecification` field names.

    Unknown keys are dropped with a warning.
    """
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in _FIELD_NAMES:
            logger.warning("Ignoring unknown sign request field '%s'", key)
            continue
        normalized[name] = value
    return normalized


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_int(errors: List[FieldError], name: str, value: Any,
               minimum: Optional[int] = None) -> None:
    if not _is_int(value):
        errors.append(FieldError(name, f"expected an integer, got {value!r}"))
    elif minimum is not None and value < minimum:
        errors.append(FieldError(name, f"must be >= {minimum}, got {value}"))


def _check_bool(errors: List[FieldError], name: str, value: Any) -> None:
    if not isinstance(value, bool):
        errors.append(FieldError(name, f"expected a boolean, got {value!r}"))


def _coerce_enum(errors: List[FieldError], name: str, value: Any, enum_cls):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        errors.append(FieldError(name, f"expected one of {allowed}, got {value!r}"))
        return None


def _coerce_bitmap(errors: List[FieldError], value: Any) -> Optional[PixelBitmap]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        width = value.get("width")
        height = value.get("height")
        pixels = value.get("pixels")
        offset_y = value.get("offsetY", value.get("offset_y"))
    elif isinstance(value, PixelBitmap):
        width, height, pixels, offset_y = value.width, value.height, value.pixels, value.offset_y
    else:
        errors.append(FieldError("icon", f"expected a pixel bitmap, got {type(value).__name__}"))
        return None

    before = len(errors)
    _check_int(errors, "icon.width", width, minimum=0)
    _check_int(errors, "icon.height", height, minimum=0)
    if offset_y is not None:
        _check_int(errors, "icon.offsetY", offset_y)
    if not isinstance(pixels, (list, tuple)):
        errors.append(FieldError("icon.pixels", "expected a sequence of booleans"))
    elif not all(isinstance(p, bool) for p in pixels):
        errors.append(FieldError("icon.pixels", "all pixels must be booleans"))
    elif len(errors) == before and len(pixels) != width * height:
        errors.append(FieldError(
            "icon.pixels",
            f"expected {width * height} pixels for {width}x{height}, got {len(pixels)}",
        ))
    if len(errors) != before:
        return None
    return PixelBitmap(width=width, height=height, pixels=tuple(pixels), offset_y=offset_y)


def _collect_errors(values: Dict[str, Any]) -> List[FieldError]:
    errors: List[FieldError] = []

    values["sign_type"] = _coerce_enum(errors, "sign_type", values["sign_type"], SignType)
    values["icon_position"] = _coerce_enum(
        errors, "icon_position", values["icon_position"], IconPosition)

    _check_int(errors, "width", values["width"], minimum=MIN_SIGN_SIZE)
    _check_int(errors, "height", values["height"], minimum=MIN_SIGN_SIZE)
    _check_bool(errors, "frame", values["frame"])
    _check_int(errors, "frame_width", values["frame_width"], minimum=1)

    hanging_width = values["hanging_width"]
    if not _is_int(hanging_width) or hanging_width not in HANGING_WIDTHS:
        errors.append(FieldError(
            "hanging_width",
            f"expected one of {', '.join(str(w) for w in HANGING_WIDTHS)}, got {hanging_width!r}",
        ))
    _check_int(errors, "thickness", values["thickness"], minimum=1)
    _check_int(errors, "icon_offset_x", values["icon_offset_x"])
    _check_int(errors, "text_offset_x", values["text_offset_x"])

    values["icon"] = _coerce_bitmap(errors, values["icon"])
    if not isinstance(values["text"], str):
        errors.append(FieldError("text", f"expected a string, got {type(values['text']).__name__}"))
    if not _is_number(values["icon_scale"]):
        errors.append(FieldError("icon_scale", f"expected a number, got {values['icon_scale']!r}"))
    for name in ("icon_offset_y", "text_offset_y"):
        if not _is_number(values[name]):
            errors.append(FieldError(name, f"expected a number, got {values[name]!r}"))
    _check_bool(errors, "with_icon", values["with_icon"])
    return errors


def validate_request(data: Mapping[str, Any]) -> SignSpecification:
    """Validate a request mapping and build a :class:`SignSpecification`.

    Omitted fields take the :class:`SignSpecification` defaults.

    Raises:
        ValidationError: if any field is malformed or out of range.
    """
    if not isinstance(data, Mapping):
        raise ValidationError([FieldError("<root>", "expected a mapping of sign fields")])

    defaults = SignSpecification()
    values = {f.name: getattr(defaults, f.name) for f in fields(SignSpecification)}
    values.update(normalize_keys(data))

    errors = _collect_errors(values)
    if errors:
        raise ValidationError(errors)
    return SignSpecification(**values)


def validate_specification(spec: SignSpecification) -> SignSpecification:
    """Re-check an already constructed specification.

    Returns a copy with enum values and icon mappings coerced the same way
    :func:`validate_request` coerces them.
    """
    values = {f.name: getattr(spec, f.name) for f in fields(SignSpecification)}
    errors = _collect_errors(values)
    if errors:
        raise ValidationError(errors)
    return SignSpecification(**values)
