from __future__ import annotations
import decimal
from dataclasses import dataclass

_ROUNDING_MODES = (
    decimal.ROUND_UP,
    decimal.ROUND_DOWN,
    decimal.ROUND_CEILING,
    decimal.ROUND_FLOOR,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_05UP,
)


@dataclass(frozen=True)
class DecimalSettings:
    precision: int = 32                    # Significant digits
    rounding: str = decimal.ROUND_HALF_UP  # One of the decimal.ROUND_* constants

    def to_context(self) -> decimal.Context:
        return decimal.Context(prec=self.precision, rounding=self.rounding)

    @classmethod
    def from_name(cls, precision: int = 32, rounding_name: str = "ROUND_HALF_UP") -> "DecimalSettings":
        """
        Build settings from a precision and a rounding mode given by name.

        Parameters
        ----------
        precision : int
            Number of significant digits, at least 1.
        rounding_name : str
            Name of a ``decimal`` rounding constant, e.g. ``"ROUND_HALF_EVEN"``.

        Raises
        ------
        ValueError
            If the precision is below 1 or the rounding name is unknown.
        """
        if precision < 1:
            raise ValueError(f"precision must be at least 1, got {precision}")
        rounding = rounding_name.strip().upper()
        if rounding not in _ROUNDING_MODES:
            raise ValueError(f"unknown rounding mode: {rounding_name!r} (choose from {', '.join(_ROUNDING_MODES)})")
        return cls(precision=precision, rounding=rounding)


DEFAULT_SETTINGS = DecimalSettings()
