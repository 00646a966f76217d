"""
Property Tests: delay parameter mapping

decode maps [-1, 1] onto [short, long] through typical at 0; encode is its
inverse and clamps anything it is given.
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hallway_nav_sim.core.delay_mapping import (
    DEFAULT_DELAY_PROFILE,
    DelayProfile,
    clamp_parameter,
    decode_delay,
    encode_delay,
)
from hallway_nav_sim.utils.exceptions import ValidationError
from tests.strategies import delay_parameters, delay_profile_strategy


class TestAnchors:
    def test_anchor_points(self):
        assert decode_delay(-1.0) == pytest.approx(0.2)
        assert decode_delay(0.0) == pytest.approx(0.5)
        assert decode_delay(1.0) == pytest.approx(3.0)

    def test_typical_delay_encodes_to_zero(self):
        assert encode_delay(0.5) == 0.0

    def test_segment_midpoints(self):
        assert decode_delay(-0.5) == pytest.approx(0.35)
        assert decode_delay(0.5) == pytest.approx(1.75)


class TestInverse:
    @given(parameter=delay_parameters)
    def test_encode_inverts_decode(self, parameter):
        assert encode_delay(decode_delay(parameter)) == pytest.approx(parameter, abs=1e-9)

    @given(delay=st.floats(min_value=0.2, max_value=3.0))
    def test_decode_inverts_encode(self, delay):
        assert decode_delay(encode_delay(delay)) == pytest.approx(delay, abs=1e-9)

    @given(profile=delay_profile_strategy(), parameter=delay_parameters)
    def test_inverse_holds_for_any_profile(self, profile, parameter):
        assert profile.encode(profile.decode(parameter)) == pytest.approx(
            parameter, abs=1e-6
        )

    @given(
        parameter_a=delay_parameters,
        parameter_b=delay_parameters,
    )
    def test_decode_is_monotonic(self, parameter_a, parameter_b):
        low, high = sorted((parameter_a, parameter_b))
        assert decode_delay(low) <= decode_delay(high)


class TestClamping:
    @given(parameter=st.floats(allow_nan=True, allow_infinity=True))
    def test_decode_never_leaves_the_delay_range(self, parameter):
        delay = decode_delay(parameter)
        assert 0.2 <= delay <= 3.0

    @given(delay=st.floats(allow_nan=False, allow_infinity=True))
    def test_encode_always_returns_a_valid_parameter(self, delay):
        assert -1.0 <= encode_delay(delay) <= 1.0

    def test_out_of_range_parameters_clamp(self):
        assert decode_delay(5.0) == pytest.approx(3.0)
        assert decode_delay(-7.0) == pytest.approx(0.2)

    def test_nan_parameter_maps_to_typical(self):
        assert clamp_parameter(math.nan) == 0.0
        assert decode_delay(math.nan) == pytest.approx(0.5)

    def test_negative_and_huge_delays_clamp(self):
        assert encode_delay(-4.0) == -1.0
        assert encode_delay(0.0) == -1.0
        assert encode_delay(100.0) == 1.0


class TestDelayProfileValidation:
    def test_default_profile(self):
        assert (
            DEFAULT_DELAY_PROFILE.short,
            DEFAULT_DELAY_PROFILE.typical,
            DEFAULT_DELAY_PROFILE.long,
        ) == (0.2, 0.5, 3.0)

    @pytest.mark.parametrize(
        "short, typical, long",
        [(0.5, 0.5, 3.0), (0.2, 3.0, 3.0), (1.0, 0.5, 3.0), (-0.1, 0.5, 3.0)],
    )
    def test_invalid_anchors_raise(self, short, typical, long):
        with pytest.raises(ValidationError):
            DelayProfile(short=short, typical=typical, long=long)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            DelayProfile(short=2.0, typical=1.0, long=3.0)
