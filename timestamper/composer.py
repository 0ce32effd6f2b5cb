"""Stamp composition: format an instant and apply the style options."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

import arrow

from timestamper.settings import StampSettings

Formatter = Callable[[datetime, str], str]

BOLD_MARKER = "**"
LINE_TERMINATOR = "\n"

# Rendered for an empty pattern, like moment's format() without arguments.
DEFAULT_PATTERN = "YYYY-MM-DDTHH:mm:ssZ"

_LITERAL_RE = re.compile(r"(\[[^\]]*\])")
# Tokens arrow renders differently from moment (or not at all). ``dddd`` and
# ``ddd`` are listed so they are not split into shorter day tokens.
_MOMENT_TOKEN_RE = re.compile(
    r"LTS|LT|LLLL|LLL|LL|L|llll|lll|ll|l|dddd|ddd|dd|d|ZZ|Z|Q|kk|k|ww|w|WW|W|X|x|E|e"
)

_LOCALE_FORMATS = {
    "LT": "h:mm A",
    "LTS": "h:mm:ss A",
    "L": "MM/DD/YYYY",
    "LL": "MMMM D, YYYY",
    "LLL": "MMMM D, YYYY h:mm A",
    "LLLL": "dddd, MMMM D, YYYY h:mm A",
    "l": "M/D/YYYY",
    "ll": "MMM D, YYYY",
    "lll": "MMM D, YYYY h:mm A",
    "llll": "ddd, MMM D, YYYY h:mm A",
}
_WEEKDAY_MIN = ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")


@dataclass(frozen=True)
class StampRequest:
    """One insertion: the instant captured at invocation and the pattern to use."""

    instant: datetime
    pattern: str


def _locale_week(day: date) -> int:
    """Week of year with Sunday-first weeks, week 1 holding January 1st."""
    sunday = day - timedelta(days=day.isoweekday() % 7)
    jan1 = date((sunday + timedelta(days=6)).year, 1, 1)
    first = jan1 - timedelta(days=jan1.isoweekday() % 7)
    return (sunday - first).days // 7 + 1


def _render_token(moment: arrow.Arrow, token: str) -> str | None:
    dt = moment.datetime
    weekday = dt.isoweekday() % 7
    if token in _LOCALE_FORMATS:
        return moment.format(_LOCALE_FORMATS[token])
    if token == "ZZ":
        return moment.format("Z")
    if token == "Z":
        return moment.format("ZZ")
    if token in ("d", "e"):
        return str(weekday)
    if token == "dd":
        return _WEEKDAY_MIN[weekday]
    if token == "E":
        return str(dt.isoweekday())
    if token == "Q":
        return str((dt.month - 1) // 3 + 1)
    if token[0] == "k":
        return f"{dt.hour or 24:0{len(token)}d}"
    if token[0] == "w":
        return f"{_locale_week(dt.date()):0{len(token)}d}"
    if token[0] == "W":
        return f"{dt.isocalendar()[1]:0{len(token)}d}"
    if token == "X":
        return str(int(dt.timestamp()))
    if token == "x":
        return str(int(dt.timestamp()) * 1000 + dt.microsecond // 1000)
    return None


def _translate(moment: arrow.Arrow, pattern: str) -> str:
    """Rewrite a moment pattern into one arrow renders the same way.

    Tokens the two libraries disagree on are rendered here and handed to
    arrow as bracketed literals; everything else is left for arrow.
    """

    def replace(match: re.Match[str]) -> str:
        rendered = _render_token(moment, match.group(0))
        return match.group(0) if rendered is None else f"[{rendered}]"

    parts = []
    for segment in _LITERAL_RE.split(pattern):
        if _LITERAL_RE.fullmatch(segment):
            parts.append(segment)
        else:
            parts.append(_MOMENT_TOKEN_RE.sub(replace, segment))
    return "".join(parts)


def format_timestamp(instant: datetime, pattern: str) -> str:
    """Render *instant* with a moment-style *pattern* (``YYYY-MM-DD``, ``hh:mm:ss``).

    Characters that are not tokens pass through literally; text in square
    brackets is emitted verbatim. ``Z`` renders ``+01:00`` and ``ZZ``
    renders ``+0100``; an empty pattern renders :data:`DEFAULT_PATTERN`.
    Locale-dependent tokens (``L``, ``LT``, ``w``...) use English
    conventions. Naive datetimes are formatted as-is, with a UTC offset.
    """
    moment = arrow.get(instant)
    return moment.format(_translate(moment, pattern or DEFAULT_PATTERN))


def compose(
    instant: datetime,
    pattern: str,
    settings: StampSettings,
    formatter: Formatter = format_timestamp,
) -> str:
    """Build the exact text to insert for *instant* and *pattern*.

    The stamp is bolded when ``make_bold`` is set, ``extra_string`` always
    follows the (possibly bolded) stamp, and ``new_line`` adds one line
    terminator at the very end. Errors raised by *formatter* propagate.
    """
    stamp = formatter(instant, pattern)
    if settings.make_bold:
        stamp = BOLD_MARKER + stamp + BOLD_MARKER
    text = stamp + settings.extra_string
    if settings.new_line:
        text += LINE_TERMINATOR
    return text


def compose_request(
    request: StampRequest,
    settings: StampSettings,
    formatter: Formatter = format_timestamp,
) -> str:
    return compose(request.instant, request.pattern, settings, formatter)
