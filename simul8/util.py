"""Small shared helpers: a last-value slot, colours and error reporting."""

from __future__ import annotations

import logging
import math
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

__all__ = [
    "OverwriteSlot",
    "Color32",
    "Hsva",
    "color32_to_hsva",
    "hsva_to_color32",
    "show_error_dialog",
    "spawn",
]

_log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(eq=False)
class _SlotCell(Generic[T]):
    lock: threading.Lock = field(default_factory=threading.Lock)
    value: Optional[T] = None


class OverwriteSlot(Generic[T]):
    """A shared single-value slot: writes overwrite, reads consume."""

    def __init__(self, cell: Optional[_SlotCell[T]] = None) -> None:
        self._cell: _SlotCell[T] = cell if cell is not None else _SlotCell()

    @classmethod
    def pair(cls) -> Tuple["OverwriteSlot[T]", "OverwriteSlot[T]"]:
        """Return two handles sharing one slot, e.g. a writer and a reader."""
        cell: _SlotCell[T] = _SlotCell()
        return cls(cell), cls(cell)

    def write(self, value: T) -> None:
        """Store ``value``, replacing anything not yet read."""
        with self._cell.lock:
            self._cell.value = value

    def try_read(self) -> Optional[T]:
        """Take the stored value, leaving the slot empty; None if empty."""
        with self._cell.lock:
            value, self._cell.value = self._cell.value, None
            return value


def _check_u8(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} component {value} is outside 0..=255")


@dataclass(frozen=True)
class Color32:
    """An 8-bit sRGB colour with unmultiplied alpha."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            _check_u8(name, getattr(self, name))

    @classmethod
    def from_rgba_unmultiplied(cls, r: int, g: int, b: int, a: int) -> "Color32":
        return cls(r, g, b, a)

    @classmethod
    def from_gray(cls, level: int) -> "Color32":
        return cls(level, level, level, 255)

    def to_srgba_unmultiplied(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


Color32.BLACK = Color32(0, 0, 0)
Color32.WHITE = Color32(255, 255, 255)
Color32.GRAY = Color32(160, 160, 160)
Color32.RED = Color32(255, 0, 0)
Color32.YELLOW = Color32(255, 255, 0)


def _fast_round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _linear_from_gamma_u8(s: int) -> float:
    if s <= 10:
        return s / 3294.6
    return ((s + 14.025) / 269.025) ** 2.4


def _gamma_u8_from_linear(linear: float) -> int:
    if linear <= 0.0:
        return 0
    if linear <= 0.0031308:
        return _fast_round(3294.6 * linear)
    if linear <= 1.0:
        return min(255, _fast_round(269.025 * linear ** (1.0 / 2.4) - 14.025))
    return 255


def _linear_u8_from_linear(value: float) -> int:
    return max(0, min(255, _fast_round(value * 255.0)))


def _hsv_from_rgb(r: float, g: float, b: float) -> Tuple[float, float, float]:
    lo = min(r, g, b)
    hi = max(r, g, b)
    spread = hi - lo
    if hi == lo:
        h = 0.0
    elif hi == r:
        h = (g - b) / (6.0 * spread)
    elif hi == g:
        h = (b - r) / (6.0 * spread) + 1.0 / 3.0
    else:
        h = (r - g) / (6.0 * spread) + 2.0 / 3.0
    h = math.modf(h + 1.0)[0]
    s = 0.0 if hi == 0.0 else 1.0 - lo / hi
    return h, s, hi


def _rgb_from_hsv(h: float, s: float, v: float) -> Tuple[float, float, float]:
    h = math.modf(math.modf(h)[0] + 1.0)[0]
    s = min(max(s, 0.0), 1.0)
    f = h * 6.0 - math.floor(h * 6.0)
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)
    sector = int(math.floor(h * 6.0)) % 6
    return {
        0: (v, t, p),
        1: (q, v, p),
        2: (p, v, t),
        3: (p, q, v),
        4: (t, p, v),
        5: (v, p, q),
    }[sector]


@dataclass(frozen=True)
class Hsva:
    """Hue, saturation, value and alpha, all in 0..1, in linear space."""

    h: float
    s: float
    v: float
    a: float

    @classmethod
    def from_srgba_unmultiplied(cls, rgba: Tuple[int, int, int, int]) -> "Hsva":
        r, g, b, a = rgba
        h, s, v = _hsv_from_rgb(
            _linear_from_gamma_u8(r), _linear_from_gamma_u8(g), _linear_from_gamma_u8(b)
        )
        return cls(h, s, v, a / 255.0)

    def to_srgba_unmultiplied(self) -> Tuple[int, int, int, int]:
        r, g, b = _rgb_from_hsv(self.h, self.s, self.v)
        return (
            _gamma_u8_from_linear(r),
            _gamma_u8_from_linear(g),
            _gamma_u8_from_linear(b),
            _linear_u8_from_linear(self.a),
        )


def color32_to_hsva(color: Color32) -> Hsva:
    return Hsva.from_srgba_unmultiplied(color.to_srgba_unmultiplied())


def hsva_to_color32(hsva: Hsva) -> Color32:
    return Color32.from_rgba_unmultiplied(*hsva.to_srgba_unmultiplied())


def show_error_dialog(message: str) -> None:
    """Report a fatal error to the user."""
    _log.error("%s", message)
    print(f"simul8 error: {message}", file=sys.stderr)


def spawn(func: Callable[..., Any], *args: Any) -> threading.Thread:
    """Run ``func(*args)`` on a detached background thread."""
    thread = threading.Thread(target=func, args=args, daemon=True)
    thread.start()
    return thread