from __future__ import annotations

import typing

import voluptuous as vol

from zigwire.exceptions import ValidationError
from zigwire.quirks.xiaomi import regions, tags


def cv_boolean(value: bool | int | str) -> bool:
    """Validate and coerce a boolean value."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        value = value.lower().strip()
        if value in ("1", "true", "yes", "on", "enable"):
            return True
        if value in ("0", "false", "no", "off", "disable"):
            return False
    elif isinstance(value, int):
        return bool(value)
    raise vol.Invalid(f"invalid boolean '{value}' value")


def cv_hex(value: int | str) -> int:
    """Convert string with possible hex number into int."""
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise vol.Invalid(f"{value} is not a valid hex number")

    try:
        if value.startswith("0x"):
            value = int(value, base=16)
        else:
            value = int(value)
    except ValueError as err:
        raise vol.Invalid(f"Could not convert '{value}' to number") from err

    return value


def cv_int_choice(*choices: int) -> typing.Callable[[typing.Any], int]:
    """Validator for enum-like preferences, which the hub stores as strings."""

    def validator(value: typing.Any) -> int:
        value = cv_hex(value)

        if value not in choices:
            raise vol.Invalid(f"{value} is not one of {list(choices)}")

        return value

    return validator


def _split_values(value: str | typing.Sequence[int]) -> list[int]:
    if isinstance(value, str):
        try:
            return [int(v) for v in value.split(",")]
        except ValueError as err:
            raise vol.Invalid(f"Grid values must be integers: {value!r}") from err

    if not all(isinstance(v, int) for v in value):
        raise vol.Invalid(f"Grid values must be integers: {value!r}")

    return list(value)


def cv_grid(value: str | typing.Sequence[int]) -> tuple[int, ...]:
    """Validate seven row values, e.g. ``"0,0,15,15,0,0,0"``."""
    rows = _split_values(value)

    try:
        regions.validate_rows(rows)
    except ValidationError as err:
        raise vol.Invalid(str(err)) from err

    return tuple(rows)


def cv_region(value: str | typing.Sequence[int]) -> tuple[int, ...]:
    """Validate a region as ``"top,bottom,left,right"`` or as seven row values.

    Either way the result is the seven row values of the grid.
    """
    values = _split_values(value)

    if len(values) == regions.ROW_COUNT:
        return cv_grid(values)

    if len(values) != 4:
        raise vol.Invalid(
            f"Region must be top,bottom,left,right or {regions.ROW_COUNT} rows: {value!r}"
        )

    try:
        return regions.RegionCodec.encode_rows(*values)
    except ValidationError as err:
        raise vol.Invalid(str(err)) from err


def cv_region_id(value: int | str) -> int:
    value = cv_hex(value)

    try:
        regions.validate_region_id(value)
    except ValidationError as err:
        raise vol.Invalid(str(err)) from err

    return value


def cv_region_profile(name: str) -> str:
    if name not in regions.PROFILES:
        raise vol.Invalid(f"Unknown region profile: {name!r}")

    return name


def cv_tag_profile(name: str) -> str:
    if name not in tags.PROFILES:
        raise vol.Invalid(f"Unknown tag profile: {name!r}")

    return name
