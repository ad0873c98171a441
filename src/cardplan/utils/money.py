import math


def round2(value: float) -> float:
    """Round to 2 decimals, halves away from zero.

    Values too large to scale by 100 (and inf/nan) come back unchanged.
    """
    scaled = value * 100
    if not math.isfinite(scaled):
        return value
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / 100 if rounded else 0.0


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def min_max_normalize(value: float, lo: float, hi: float) -> float:
    if hi == lo:
        return 0.5
    return clamp01((value - lo) / (hi - lo))


def format_try(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}₺{abs(round2(value)):,.2f}"
