"""Scalar helpers shared by the audio and ui layers."""


def clamp(value: float, min_val: float, max_val: float) -> float:
    return max(min_val, min(value, max_val))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def map_range(value: float, in_min: float, in_max: float,
              out_min: float, out_max: float) -> float:
    """Linearly remap value from [in_min, in_max] to [out_min, out_max]."""
    if abs(in_max - in_min) < 1e-10:
        return out_min
    return out_min + (value - in_min) * (out_max - out_min) / (in_max - in_min)
