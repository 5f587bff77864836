"""
Coordinate transform between the virtual pixel canvas and percent space.

All ECML geometry is stored as percentages of a fixed 720x405 virtual
canvas so content renders the same on devices with different pixel ratios.
Live objects on the rendering surface work in pixels.

Both conversions mutate the mapping they are given and only touch the
geometry keys that are present. Numeric strings (as parsed from markup)
are coerced; values that are not numbers are left as they are and their
keys returned to the caller.
"""

from typing import Any, Dict, List, MutableMapping, Optional

VIRTUAL_WIDTH = 720
VIRTUAL_HEIGHT = 405
PERCENT_PRECISION = 2

_X_AXIS = ("x", "w")
_Y_AXIS = ("y", "h")

# ECML attribute name -> rendering surface property name
RENDER_PROPERTY_NAMES: Dict[str, str] = {
    "x": "left",
    "y": "top",
    "w": "width",
    "h": "height",
    "radius": "rx",
    "color": "fill",
    "rotate": "angle",
}


def _as_rotation(value: Any) -> Any:
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def pixel_to_percent(obj: MutableMapping[str, Any]) -> List[str]:
    """Convert x/y/w/h from canvas pixels to percent, rounded to two decimals.

    Returns:
        Geometry keys left unconverted because their value is not a number
    """
    skipped = []
    for keys, extent in ((_X_AXIS, VIRTUAL_WIDTH), (_Y_AXIS, VIRTUAL_HEIGHT)):
        for key in keys:
            if key not in obj:
                continue
            value = _as_number(obj[key])
            if value is None:
                skipped.append(key)
            else:
                obj[key] = round(value / extent * 100, PERCENT_PRECISION)
    if "rotate" in obj:
        obj["rotate"] = _as_rotation(obj["rotate"])
    return skipped


def percent_to_pixel(obj: MutableMapping[str, Any]) -> List[str]:
    """Convert x/y/w/h from percent to canvas pixels. No rounding.

    Returns:
        Geometry keys left unconverted because their value is not a number
    """
    skipped = []
    for keys, extent in ((_X_AXIS, VIRTUAL_WIDTH), (_Y_AXIS, VIRTUAL_HEIGHT)):
        for key in keys:
            if key not in obj:
                continue
            value = _as_number(obj[key])
            if value is None:
                skipped.append(key)
            else:
                obj[key] = value * (extent / 100)
    return skipped


def to_render_props(data: MutableMapping[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``data`` with rendering-surface property names added.

    Example:
        >>> to_render_props({"x": 10, "color": "red"})
        {'x': 10, 'color': 'red', 'left': 10, 'fill': 'red'}
    """
    props = dict(data)
    for ecml_name, render_name in RENDER_PROPERTY_NAMES.items():
        if data.get(ecml_name):
            props[render_name] = data[ecml_name]
    return props


__all__ = [
    "VIRTUAL_WIDTH",
    "VIRTUAL_HEIGHT",
    "PERCENT_PRECISION",
    "RENDER_PROPERTY_NAMES",
    "pixel_to_percent",
    "percent_to_pixel",
    "to_render_props",
]
