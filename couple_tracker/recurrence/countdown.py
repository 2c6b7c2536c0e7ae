"""
Countdown texts for important dates.

The app speaks Brazilian Portuguese; English is kept for shared devices
and tests. Only the day count is substituted, there is no other locale logic.
"""

from typing import Optional

from couple_tracker.models.dates import Countdown, CountdownState


DEFAULT_LOCALE = "pt-BR"

MESSAGES: dict[str, dict[str, str]] = {
    "pt-BR": {
        "passed": "Já passou",
        "today": "É hoje! 🎉",
        "tomorrow": "É amanhã!",
        "remaining": "Faltam {days} dias",
        "compact_one": "Em 1 dia",
        "compact_remaining": "Em {days} dias",
        "no_upcoming": "Nenhuma data próxima.",
    },
    "en": {
        "passed": "Already passed",
        "today": "It's today! 🎉",
        "tomorrow": "It's tomorrow!",
        "remaining": "{days} days remaining",
        "compact_one": "In 1 day",
        "compact_remaining": "In {days} days",
        "no_upcoming": "No upcoming dates.",
    },
}

SUPPORTED_LOCALES = tuple(MESSAGES)


def messages_for(locale: str) -> dict[str, str]:
    """Message catalog of a locale; raises ValueError if unsupported."""
    try:
        return MESSAGES[locale]
    except KeyError:
        raise ValueError(
            f"Unsupported locale: {locale}. Supported: {', '.join(SUPPORTED_LOCALES)}"
        ) from None


def countdown_state(days_left: Optional[int]) -> CountdownState:
    if days_left is None:
        return CountdownState.NONE
    if days_left < 0:
        return CountdownState.PASSED
    if days_left == 0:
        return CountdownState.TODAY
    if days_left == 1:
        return CountdownState.TOMORROW
    return CountdownState.REMAINING


def describe_countdown(
    days_left: Optional[int],
    locale: str = DEFAULT_LOCALE,
    compact: bool = False,
) -> str:
    """
    Countdown text for a number of days left.

    Args:
        days_left: Signed day count, or None when it cannot be computed
        locale: Message catalog to use
        compact: Dashboard wording ("Em N dias") instead of the dates page one

    Returns:
        The text, or an empty string when there is nothing to show.
    """
    messages = messages_for(locale)
    state = countdown_state(days_left)

    if state == CountdownState.NONE:
        return ""
    if state == CountdownState.PASSED:
        return messages["passed"]
    if state == CountdownState.TODAY:
        return messages["today"]

    if compact:
        if state == CountdownState.TOMORROW:
            return messages["compact_one"]
        return messages["compact_remaining"].format(days=days_left)

    if state == CountdownState.TOMORROW:
        return messages["tomorrow"]
    return messages["remaining"].format(days=days_left)


def build_countdown(
    days_left: Optional[int],
    locale: str = DEFAULT_LOCALE,
    compact: bool = False,
) -> Countdown:
    """Countdown view model with state and text."""
    return Countdown(
        state=countdown_state(days_left),
        days_left=days_left,
        text=describe_countdown(days_left, locale=locale, compact=compact),
    )


def no_upcoming_message(locale: str = DEFAULT_LOCALE) -> str:
    return messages_for(locale)["no_upcoming"]
