"""Label icon registry and label color derivation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class IconSpec:
    name: str
    glyph: str


DEFAULT_LABEL_GLYPH = "🏷️"
DONE_GLYPH = "📋"
PLACEHOLDER_AVATAR_GLYPH = "👤"

# Names follow the label icon names stored by the backend.
ICONS: Tuple[IconSpec, ...] = (
    IconSpec("fire", "🔥"),
    IconSpec("star", "⭐"),
    IconSpec("heart", "❤️"),
    IconSpec("flag", "🚩"),
    IconSpec("bell", "🔔"),
    IconSpec("bug", "🐞"),
    IconSpec("book", "📖"),
    IconSpec("calendar", "📅"),
    IconSpec("car", "🚗"),
    IconSpec("coffee", "☕"),
    IconSpec("crown", "👑"),
    IconSpec("dollar", "💲"),
    IconSpec("experiment", "🧪"),
    IconSpec("gift", "🎁"),
    IconSpec("home", "🏠"),
    IconSpec("idcard", "🪪"),
    IconSpec("mail", "✉️"),
    IconSpec("medicine_box", "💊"),
    IconSpec("phone", "📞"),
    IconSpec("rocket", "🚀"),
    IconSpec("shopping", "🛒"),
    IconSpec("skin", "👕"),
    IconSpec("smile", "🙂"),
    IconSpec("team", "👥"),
    IconSpec("thunderbolt", "⚡"),
    IconSpec("tool", "🔧"),
    IconSpec("trophy", "🏆"),
    IconSpec("user", "👤"),
    IconSpec("wallet", "👛"),
)

_GLYPH_BY_NAME: Dict[str, str] = {}
for _spec in ICONS:
    # First registration wins, same as a linear scan.
    _GLYPH_BY_NAME.setdefault(_spec.name, _spec.glyph)


def get_icon(name: Optional[str]) -> str:
    """Resolve a label icon name to a glyph; unknown names get the tag glyph."""
    if not name:
        return DEFAULT_LABEL_GLYPH
    return _GLYPH_BY_NAME.get(name, DEFAULT_LABEL_GLYPH)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_to_rgb(value: str) -> str:
    """Deterministic ``#RRGGBB`` color for a label value.

    Matches the web client's hash so labels keep their colors across clients:
    ``hash = code + ((hash << 5) - hash)`` over UTF-16 code units, with the
    shift done in 32-bit signed arithmetic.
    """
    h = 0
    data = (value or "").encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = code + (_to_int32(_to_int32(h) << 5) - h)
    c = format(_to_int32(h) & 0x00FFFFFF, "X")
    return "#" + c.rjust(6, "0")
