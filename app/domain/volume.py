"""Volume and fill-percentage derivation from raw level readings.

Both functions are pure and never raise: out-of-range inputs saturate to
the nearest valid value instead.
"""

from __future__ import annotations

import math

from app.domain.entities import Tank

CUBIC_CM_PER_LITER = 1000


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_volume(tank: Tank, liquid_level: float) -> float:
    """Return the liquid volume in liters for ``liquid_level`` centimeters.

    The level is clamped to ``[0, tank.height]``. Tanks with a diameter are
    treated as vertical cylinders; the others scale linearly between empty
    and ``tank.capacity``.
    """
    level = _clamp(liquid_level, 0.0, tank.height)

    if tank.diameter:
        radius = tank.diameter / 2
        return math.pi * radius**2 * level / CUBIC_CM_PER_LITER

    if tank.height <= 0:
        return 0.0
    return level * tank.capacity / tank.height


def calculate_percentage(volume: float, capacity: float) -> float:
    """Fill percentage of ``volume`` against ``capacity``, bounded to [0, 100]."""
    if capacity <= 0:
        return 0.0
    return _clamp(volume / capacity * 100, 0.0, 100.0)
