"""
Validation functions for attr.
"""

from typing import Any

from attrs import define
from attrs.validators import in_

__all__ = ["in_", "range_", "positive"]


@define(repr=False, hash=True)
class _RangeValidator:
    minimum: float
    maximum: float
    exclusive_minimum: bool = False

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            if self.exclusive_minimum:
                in_range = self.minimum < value and value <= self.maximum
            else:
                in_range = self.minimum <= value and value <= self.maximum
        except TypeError:
            in_range = False

        if not in_range:
            raise ValueError(
                "'{name}' must be in range {left}{minimum!r}, {maximum!r}]: {value!r}".format(
                    name=attr.name,
                    left="(" if self.exclusive_minimum else "[",
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self) -> str:
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


def range_(minimum: float, maximum: float) -> _RangeValidator:
    """
    A validator that raises a :exc:`ValueError` if the initializer is called
    with a value that does not belong in the [minimum, maximum] range. The
    check is performed using ``minimum <= value and value <= maximum``
    """
    return _RangeValidator(minimum, maximum)


def positive(inst: Any, attr: Any, value: Any) -> None:
    """Reject zero, negative and NaN values."""
    _RangeValidator(0.0, float("inf"), exclusive_minimum=True)(inst, attr, value)
