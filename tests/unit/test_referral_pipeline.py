"""Unit tests for the referral status pipeline."""

import pytest

from sfdsa.errors import InvalidTransitionError
from sfdsa.referrals.pipeline import (
    PIPELINE,
    STATUS_POINTS,
    STATUS_PROGRESS,
    ReferralStatus,
    can_transition,
    conversion_rate,
    new_referral_code,
    normalize_referral_code,
    validate_transition,
)


class TestTransitions:
    @pytest.mark.parametrize("current,target", list(zip(PIPELINE, PIPELINE[1:])))
    def test_each_forward_step_allowed(self, current, target):
        assert can_transition(current, target)

    def test_stages_may_be_skipped(self):
        assert can_transition(ReferralStatus.CONTACTED, ReferralStatus.INTERVIEW)

    def test_backwards_rejected(self):
        with pytest.raises(InvalidTransitionError):
            validate_transition(ReferralStatus.INTERVIEW, ReferralStatus.APPLIED)

    def test_same_status_rejected(self):
        assert not can_transition(ReferralStatus.APPLIED, ReferralStatus.APPLIED)

    def test_decline_from_open_status(self):
        assert can_transition(ReferralStatus.BACKGROUND, ReferralStatus.DECLINED)

    @pytest.mark.parametrize("terminal", [ReferralStatus.HIRED, ReferralStatus.DECLINED])
    def test_terminal_statuses_are_final(self, terminal):
        for target in ReferralStatus:
            assert not can_transition(terminal, target)


class TestTables:
    def test_full_pipeline_points(self):
        assert sum(STATUS_POINTS[s] for s in PIPELINE) == 1125

    def test_progress_is_monotonic(self):
        progress = [STATUS_PROGRESS[s] for s in PIPELINE]
        assert progress == sorted(progress)
        assert progress[-1] == 100


class TestHelpers:
    def test_conversion_rate(self):
        assert conversion_rate(0, 0) == 0
        assert conversion_rate(3, 1) == 33
        assert conversion_rate(4, 4) == 100

    def test_new_referral_code_shape(self):
        code = new_referral_code("vr2024")
        prefix, suffix = code.split("-")
        assert prefix == "VR2024"
        assert len(suffix) == 8
        assert suffix.isalnum() and suffix == suffix.upper()

    def test_new_referral_codes_differ(self):
        assert len({new_referral_code("VR2024") for _ in range(50)}) == 50

    def test_normalize_referral_code(self):
        assert normalize_referral_code("  vr2024-ab12cd34 ") == "VR2024-AB12CD34"
