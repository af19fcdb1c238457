"""Immutable complex number value type used by the solver and the polynomials."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

__all__ = ["ComplexNumber", "NonFiniteValueError", "ZERO", "ONE"]


class NonFiniteValueError(ArithmeticError):
    """Raised when a complex number would hold a NaN or infinite component."""


@dataclass(frozen=True)
class ComplexNumber:
    """A complex number ``real + imaginary*i`` with finite components.

    Every operation returns a new instance, so values can be shared freely
    between loop iterations and threads.
    """

    real: float = 0.0
    imaginary: float = 0.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.real) and math.isfinite(self.imaginary)):
            raise NonFiniteValueError(
                f"complex components must be finite, got ({self.real}, {self.imaginary})"
            )

    @classmethod
    def from_complex(cls, value: complex) -> ComplexNumber:
        return cls(float(value.real), float(value.imag))

    def to_complex(self) -> complex:
        return complex(self.real, self.imaginary)

    def add(self, summand: ComplexNumber) -> ComplexNumber:
        return ComplexNumber(self.real + summand.real, self.imaginary + summand.imaginary)

    def subtract(self, subtrahend: ComplexNumber) -> ComplexNumber:
        return ComplexNumber(self.real - subtrahend.real, self.imaginary - subtrahend.imaginary)

    def multiply(self, factor: Union[ComplexNumber, float]) -> ComplexNumber:
        """Multiply by another complex number or by a real scalar."""
        if isinstance(factor, ComplexNumber):
            return ComplexNumber(
                self.real * factor.real - self.imaginary * factor.imaginary,
                self.real * factor.imaginary + self.imaginary * factor.real,
            )
        return ComplexNumber(self.real * factor, self.imaginary * factor)

    def divide(self, divisor: ComplexNumber) -> ComplexNumber:
        """Divide by ``divisor`` using the conjugate of the divisor.

        ``(a+bi)/(c+di) = (a+bi)(c-di)/(c²+d²)``. A divisor whose squared
        modulus is zero raises ``ZeroDivisionError``.
        """
        denominator = divisor.real * divisor.real + divisor.imaginary * divisor.imaginary
        return ComplexNumber(
            (self.real * divisor.real + self.imaginary * divisor.imaginary) / denominator,
            (self.imaginary * divisor.real - self.real * divisor.imaginary) / denominator,
        )

    def conjugate(self) -> ComplexNumber:
        return ComplexNumber(self.real, -self.imaginary)

    def pow(self, n: int) -> ComplexNumber:
        """Raise to a non-negative integer power by repeated multiplication."""
        if n < 0:
            raise ValueError(f"exponent must be non-negative, got {n}")
        result = ONE
        for _ in range(n):
            result = result.multiply(self)
        return result

    def distance_to(self, other: ComplexNumber) -> float:
        dx = self.real - other.real
        dy = self.imaginary - other.imaginary
        return math.sqrt(dx * dx + dy * dy)

    def modulus(self) -> float:
        return self.distance_to(ZERO)

    def __add__(self, other: ComplexNumber) -> ComplexNumber:
        return self.add(other)

    def __sub__(self, other: ComplexNumber) -> ComplexNumber:
        return self.subtract(other)

    def __mul__(self, other: Union[ComplexNumber, float]) -> ComplexNumber:
        return self.multiply(other)

    def __rmul__(self, other: float) -> ComplexNumber:
        return self.multiply(other)

    def __truediv__(self, other: ComplexNumber) -> ComplexNumber:
        return self.divide(other)

    def __pow__(self, n: int) -> ComplexNumber:
        return self.pow(n)

    def __neg__(self) -> ComplexNumber:
        return ComplexNumber(-self.real, -self.imaginary)

    def __str__(self) -> str:
        re, im = self.real, self.imaginary
        if im == 0:
            return str(re)
        if re == 0:
            return f"{im}i"
        sign = " " if im < 0 else " +"
        return f"{re}{sign}{im}i"


ZERO = ComplexNumber(0.0, 0.0)
ONE = ComplexNumber(1.0, 0.0)
