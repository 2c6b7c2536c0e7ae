"""
Tests for countdown texts.
"""

import pytest

from couple_tracker.models.dates import CountdownState
from couple_tracker.recurrence.countdown import (
    build_countdown,
    countdown_state,
    describe_countdown,
    no_upcoming_message,
)


class TestCountdownState:

    @pytest.mark.parametrize("days_left, expected", [
        (None, CountdownState.NONE),
        (-30, CountdownState.PASSED),
        (-1, CountdownState.PASSED),
        (0, CountdownState.TODAY),
        (1, CountdownState.TOMORROW),
        (2, CountdownState.REMAINING),
        (365, CountdownState.REMAINING),
    ])
    def test_states(self, days_left, expected):
        assert countdown_state(days_left) == expected


class TestDescribeCountdown:

    def test_not_computable_is_empty(self):
        assert describe_countdown(None) == ""
        assert describe_countdown(None, compact=True) == ""

    def test_portuguese_is_default(self):
        assert describe_countdown(-3) == "Já passou"
        assert describe_countdown(0) == "É hoje! 🎉"
        assert describe_countdown(1) == "É amanhã!"
        assert describe_countdown(10) == "Faltam 10 dias"

    def test_english(self):
        assert describe_countdown(-3, locale="en") == "Already passed"
        assert describe_countdown(0, locale="en") == "It's today! 🎉"
        assert describe_countdown(1, locale="en") == "It's tomorrow!"
        assert describe_countdown(10, locale="en") == "10 days remaining"

    def test_compact_wording(self):
        assert describe_countdown(0, compact=True) == "É hoje! 🎉"
        assert describe_countdown(1, compact=True) == "Em 1 dia"
        assert describe_countdown(5, compact=True) == "Em 5 dias"
        assert describe_countdown(5, locale="en", compact=True) == "In 5 days"

    def test_unknown_locale(self):
        with pytest.raises(ValueError, match="Unsupported locale"):
            describe_countdown(3, locale="fr")


class TestBuildCountdown:

    def test_model_fields(self):
        countdown = build_countdown(10)
        assert countdown.state == CountdownState.REMAINING
        assert countdown.days_left == 10
        assert countdown.text == "Faltam 10 dias"

    def test_none(self):
        countdown = build_countdown(None, locale="en")
        assert countdown.state == CountdownState.NONE
        assert countdown.text == ""


def test_no_upcoming_message():
    assert no_upcoming_message() == "Nenhuma data próxima."
    assert no_upcoming_message("en") == "No upcoming dates."
