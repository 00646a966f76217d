"""
Two-segment piecewise-linear mapping between a continuous delay parameter in
[-1, 1] and an actual reconsideration delay in seconds.

The segments are anchored at ``(short, typical, long)``: parameter -1 maps to
the short delay, 0 to the typical delay and +1 to the long delay. ``encode``
and ``decode`` are exact inverses on ``[short, long]`` up to float tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DEFAULT_LONG_DELAY,
    DEFAULT_SHORT_DELAY,
    DEFAULT_TYPICAL_DELAY,
    DELAY_PARAMETER_RANGE,
)
from ..utils.exceptions import ValidationError

__all__ = ["DelayProfile", "decode_delay", "encode_delay", "clamp_parameter"]


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _inverse_lerp(a: float, b: float, value: float) -> float:
    if b == a:
        return 0.0
    return (value - a) / (b - a)


def clamp_parameter(parameter: float) -> float:
    """Clamp a delay parameter into [-1, 1]; NaN maps to 0."""
    low, high = DELAY_PARAMETER_RANGE
    value = float(parameter)
    if value != value:
        return 0.0
    return min(high, max(low, value))


@dataclass(frozen=True)
class DelayProfile:
    """Anchors of the delay mapping, in seconds."""

    short: float = DEFAULT_SHORT_DELAY
    typical: float = DEFAULT_TYPICAL_DELAY
    long: float = DEFAULT_LONG_DELAY

    def __post_init__(self):
        if self.short < 0.0:
            raise ValidationError(
                "short delay must be non-negative",
                parameter_name="short",
                parameter_value=self.short,
            )
        if not (self.short < self.typical < self.long):
            raise ValidationError(
                "delay anchors must satisfy short < typical < long",
                parameter_name="typical",
                parameter_value=(self.short, self.typical, self.long),
            )

    def decode(self, parameter: float) -> float:
        return decode_delay(parameter, self)

    def encode(self, delay: float) -> float:
        return encode_delay(delay, self)


DEFAULT_DELAY_PROFILE = DelayProfile()


def decode_delay(parameter: float, profile: DelayProfile = DEFAULT_DELAY_PROFILE) -> float:
    """Map a parameter in [-1, 1] to a delay; out-of-range input is clamped."""
    p = clamp_parameter(parameter)
    if p < 0.0:
        return _lerp(profile.short, profile.typical, p + 1.0)
    return _lerp(profile.typical, profile.long, p)


def encode_delay(delay: float, profile: DelayProfile = DEFAULT_DELAY_PROFILE) -> float:
    """Map a recorded delay back to its parameter.

    Delays below ``short`` or above ``long`` are clamped to the segment ends, so
    the result always lies in [-1, 1]. ``typical`` maps to exactly 0.
    """
    d = min(profile.long, max(profile.short, float(delay)))
    if d < profile.typical:
        p = _inverse_lerp(profile.short, profile.typical, d) - 1.0
    else:
        p = _inverse_lerp(profile.typical, profile.long, d)
    return clamp_parameter(p)
