"""Arithmetic properties of the complex number value type."""

import math

import pytest

from newton_fractal.complex_number import ONE, ZERO, ComplexNumber, NonFiniteValueError

PAIRS = [
    (ComplexNumber(1.0, 2.0), ComplexNumber(3.0, -4.0)),
    (ComplexNumber(-0.5, 0.866), ComplexNumber(0.25, 0.1)),
    (ComplexNumber(1e3, -7.0), ComplexNumber(-2.0, 1e-3)),
]


def _close(a, b, tol=1e-9):
    return a.distance_to(b) <= tol * max(1.0, a.modulus(), b.modulus())


@pytest.mark.parametrize("a,b", PAIRS)
def test_addition_commutes(a, b):
    assert a.add(b) == b.add(a)
    assert a + b == b + a


@pytest.mark.parametrize("a,b", PAIRS)
def test_subtract_undoes_add(a, b):
    assert _close(a.add(b).subtract(b), a)


@pytest.mark.parametrize("a,b", PAIRS)
def test_multiply_undoes_divide(a, b):
    assert _close(a.divide(b).multiply(b), a)


def test_divide_matches_builtin_complex():
    a, b = ComplexNumber(1.0, 2.0), ComplexNumber(3.0, -4.0)
    expected = (1 + 2j) / (3 - 4j)
    result = a / b
    assert result.real == pytest.approx(expected.real)
    assert result.imaginary == pytest.approx(expected.imag)


def test_multiply_by_real_scalar():
    assert ComplexNumber(1.5, -2.0).multiply(2.0) == ComplexNumber(3.0, -4.0)
    assert 2 * ComplexNumber(1.5, -2.0) == ComplexNumber(3.0, -4.0)


def test_operations_return_new_values():
    a = ComplexNumber(1.0, 1.0)
    b = a.add(ONE)
    assert a == ComplexNumber(1.0, 1.0)
    assert b == ComplexNumber(2.0, 1.0)
    with pytest.raises(AttributeError):
        a.real = 5.0


def test_conjugate():
    assert ComplexNumber(2.0, 3.0).conjugate() == ComplexNumber(2.0, -3.0)
    assert -ComplexNumber(2.0, 3.0) == ComplexNumber(-2.0, -3.0)


def test_pow():
    z = ComplexNumber(1.0, 1.0)
    assert z.pow(0) == ONE
    assert ZERO.pow(0) == ONE
    assert z.pow(1) == z
    assert z ** 2 == ComplexNumber(0.0, 2.0)
    assert z.pow(3) == z.multiply(z).multiply(z)
    with pytest.raises(ValueError):
        z.pow(-1)


def test_equality_is_exact():
    assert ComplexNumber(0.1 + 0.2, 0.0) != ComplexNumber(0.3, 0.0)
    assert ComplexNumber(0.1 + 0.2, 0.0).distance_to(ComplexNumber(0.3, 0.0)) < 1e-15
    assert hash(ComplexNumber(1.0, -0.0)) == hash(ComplexNumber(1.0, 0.0))


def test_distance_and_modulus():
    assert ComplexNumber(3.0, 4.0).modulus() == 5.0
    assert ComplexNumber(1.0, 1.0).distance_to(ComplexNumber(4.0, 5.0)) == 5.0


@pytest.mark.parametrize("real,imaginary", [(math.nan, 0.0), (0.0, math.inf), (-math.inf, 1.0)])
def test_non_finite_components_are_rejected(real, imaginary):
    with pytest.raises(NonFiniteValueError):
        ComplexNumber(real, imaginary)


def test_overflow_is_rejected():
    big = ComplexNumber(1e200, 0.0)
    with pytest.raises(ArithmeticError):
        big.multiply(big)


def test_division_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        ONE.divide(ZERO)


def test_builtin_conversion():
    z = ComplexNumber.from_complex(2 - 3j)
    assert z == ComplexNumber(2.0, -3.0)
    assert z.to_complex() == 2 - 3j


@pytest.mark.parametrize(
    "z,text",
    [
        (ComplexNumber(1.0, 2.0), "1.0 +2.0i"),
        (ComplexNumber(1.0, -2.0), "1.0 -2.0i"),
        (ComplexNumber(0.0, 2.0), "2.0i"),
        (ComplexNumber(1.5, 0.0), "1.5"),
        (ZERO, "0.0"),
    ],
)
def test_str(z, text):
    assert str(z) == text
