"""Color tokens to CSS class names.

Notion stores colors as tokens such as ``"red"`` or
``"yellow_background"``.  :func:`resolve_color` maps the known ones to
``color-<name>`` / ``background-<name>`` classes.  Unknown tokens are
returned unchanged so colors added by the service later still reach the
markup.
"""

from __future__ import annotations

_COLOR_PREFIX = "color-"
_BACKGROUND_PREFIX = "background-"

# Token used by the service -> class suffix.  The service calls green "teal".
_FOREGROUND_COLORS: dict[str, str] = {
    "gray": "gray",
    "brown": "brown",
    "orange": "orange",
    "yellow": "yellow",
    "teal": "green",
    "blue": "blue",
    "purple": "purple",
    "pink": "pink",
    "red": "red",
}

# Public API spelling.
_ALIASES: dict[str, str] = {
    "green": "teal",
    "green_background": "teal_background",
}

COLOR_CLASSES: dict[str, str] = {
    **{token: _COLOR_PREFIX + name for token, name in _FOREGROUND_COLORS.items()},
    **{
        f"{token}_background": _BACKGROUND_PREFIX + name
        for token, name in _FOREGROUND_COLORS.items()
    },
}


def resolve_color(token: str | None, default: str = "") -> str:
    """Map a color token to its CSS class.

    Parameters
    ----------
    token:
        Raw color token.  ``None`` or ``""`` falls back to *default*.
    default:
        Token used when *token* is empty; resolved the same way.

    Returns
    -------
    str
        The CSS class, the token itself when unknown, or ``""``.
    """
    if not token:
        token = default
    if not token:
        return ""
    token = _ALIASES.get(token, token)
    return COLOR_CLASSES.get(token, token)
