"""Real and complex polynomials with a memoized derivative."""

from __future__ import annotations

import math
from typing import Any, ClassVar, Iterable, Optional, Tuple

import numpy as np

from .complex_number import ZERO, ComplexNumber
from .constants import POLYNOMIAL_SEED, RANDOM_COEFFICIENT_SCALE

__all__ = ["InvalidPolynomialError", "Polynomial", "ComplexPolynomial"]


class InvalidPolynomialError(ValueError):
    """Raised when no non-zero finite coefficient remains after trimming."""


class _PolynomialBase:
    """Coefficient storage shared by the real and the complex polynomial.

    ``coefficients[i]`` multiplies ``x**i``. Non-finite coefficients become
    zero and trailing zeros are trimmed, so ``degree`` is the true degree.
    """

    _ZERO: ClassVar[Any]

    def __init__(self, *coefficients: Any) -> None:
        trimmed = self._normalize(coefficients)
        if not trimmed:
            raise InvalidPolynomialError(
                f"{type(self).__name__} needs at least one non-zero finite coefficient, "
                f"got {coefficients!r}"
            )
        self._coefficients = trimmed
        self._derivative: Optional[_PolynomialBase] = None

    @classmethod
    def zero(cls):
        """Return the zero polynomial (degree 0, coefficients ``[0]``)."""
        instance = cls.__new__(cls)
        instance._coefficients = (cls._ZERO,)
        instance._derivative = None
        return instance

    @classmethod
    def _build(cls, coefficients: Iterable[Any]):
        trimmed = cls._normalize(tuple(coefficients))
        if not trimmed:
            return cls.zero()
        return cls(*trimmed)

    @classmethod
    def _normalize(cls, coefficients: Tuple[Any, ...]) -> Tuple[Any, ...]:
        values = [cls._coerce(value) for value in coefficients]
        while values and values[-1] == cls._ZERO:
            values.pop()
        return tuple(values)

    @staticmethod
    def _coerce(value: Any) -> Any:
        raise NotImplementedError

    @property
    def coefficients(self) -> Tuple[Any, ...]:
        return self._coefficients

    @property
    def degree(self) -> int:
        return len(self._coefficients) - 1

    def derive(self):
        """Return the formal derivative, computed once and cached."""
        if self._derivative is None:
            if self.degree == 0:
                self._derivative = type(self).zero()
            else:
                self._derivative = type(self)._build(
                    coefficient * power
                    for power, coefficient in enumerate(self._coefficients)
                    if power > 0
                )
        return self._derivative

    def slope(self, x):
        return self.derive().eval(x)

    def eval(self, x):
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._coefficients == other._coefficients

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._coefficients))

    def __repr__(self) -> str:
        args = ", ".join(repr(c) for c in self._coefficients)
        return f"{type(self).__name__}({args})"

    def __str__(self) -> str:
        terms = []
        for power, coefficient in enumerate(self._coefficients):
            if coefficient == self._ZERO:
                continue
            terms.append(_format_term(self._as_real(coefficient), power, first=not terms))
        return "".join(terms) or "0.0"

    @staticmethod
    def _as_real(coefficient: Any) -> Any:
        return coefficient


def _format_term(coefficient: Any, power: int, first: bool) -> str:
    if power == 0:
        return str(coefficient)
    variable = "x" if power == 1 else f"x^{power}"
    if isinstance(coefficient, ComplexNumber):
        return f"{'' if first else '+'}({coefficient}){variable}"
    if coefficient in (1, -1):
        sign = "-" if coefficient < 0 else ("" if first else "+")
        return f"{sign}{variable}"
    sign = "" if coefficient < 0 or first else "+"
    return f"{sign}{coefficient}{variable}"


class Polynomial(_PolynomialBase):
    """Polynomial with real coefficients, evaluated at real points."""

    _ZERO = 0.0

    @staticmethod
    def _coerce(value: Any) -> float:
        number = float(value)
        return number if math.isfinite(number) else 0.0

    def eval(self, x: float) -> float:
        coefficients = self._coefficients
        y = coefficients[-1]
        for coefficient in reversed(coefficients[:-1]):
            y = y * x + coefficient
        return y

    def to_complex(self) -> ComplexPolynomial:
        return ComplexPolynomial._build(self._coefficients)

    @classmethod
    def generate_random(cls, degree: int, rng: Optional[np.random.Generator] = None) -> Polynomial:
        return cls._build(_random_coefficients(degree, rng))


class ComplexPolynomial(_PolynomialBase):
    """Polynomial evaluated at ``ComplexNumber`` points.

    Coefficients may be real numbers, built-in ``complex`` values or
    ``ComplexNumber`` instances; they are stored as ``ComplexNumber``.
    """

    _ZERO = ZERO

    @staticmethod
    def _coerce(value: Any) -> ComplexNumber:
        if isinstance(value, ComplexNumber):
            return value
        if isinstance(value, complex):
            real, imaginary = value.real, value.imag
        else:
            real, imaginary = float(value), 0.0
        if not (math.isfinite(real) and math.isfinite(imaginary)):
            return ZERO
        return ComplexNumber(real, imaginary)

    @staticmethod
    def _as_real(coefficient: ComplexNumber) -> Any:
        if coefficient.imaginary == 0:
            return coefficient.real
        return coefficient

    @property
    def has_real_coefficients(self) -> bool:
        return all(c.imaginary == 0 for c in self._coefficients)

    def eval(self, z: ComplexNumber) -> ComplexNumber:
        if not isinstance(z, ComplexNumber):
            z = ComplexNumber.from_complex(complex(z))
        coefficients = self._coefficients
        y = coefficients[-1]
        for coefficient in reversed(coefficients[:-1]):
            y = y.multiply(z).add(coefficient)
        return y

    def coefficient_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return the real and imaginary parts as ``float64`` arrays."""
        real = np.array([c.real for c in self._coefficients], dtype=np.float64)
        imaginary = np.array([c.imaginary for c in self._coefficients], dtype=np.float64)
        return real, imaginary

    def to_real(self) -> Polynomial:
        if not self.has_real_coefficients:
            raise ValueError(f"{self} has non-real coefficients")
        return Polynomial._build(c.real for c in self._coefficients)

    @classmethod
    def generate_random(
        cls, degree: int, rng: Optional[np.random.Generator] = None
    ) -> ComplexPolynomial:
        return cls._build(_random_coefficients(degree, rng))


def _random_coefficients(degree: int, rng: Optional[np.random.Generator]) -> list:
    """Constant term in [0, 1), every other coefficient in [0, 4.5)."""
    if degree < 0:
        raise ValueError(f"degree must be non-negative, got {degree}")
    if rng is None:
        rng = np.random.default_rng(POLYNOMIAL_SEED)
    coefficients = [float(rng.random())]
    coefficients.extend(float(rng.random()) * RANDOM_COEFFICIENT_SCALE for _ in range(degree))
    return coefficients
