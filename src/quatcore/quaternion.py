"""
===============================================================================
QUATCORE - Quaternion Value Type
===============================================================================

A four-component quaternion value with the full Hamilton algebra:
construction, component-wise arithmetic, the Hamilton product, division,
conjugation, inversion, normalization, Euler-angle construction, array
conversions and tolerance-based comparison.

Convention
----------
Components are stored scalar-first:

    q = [w, x, y, z] = w + x*i + y*j + z*k

in IEEE-754 single precision (numpy.float32). Any four floats form a valid
quaternion, including the zero quaternion; only the operations that need a
non-zero length (inverse, normalize) look at it.

Value and in-place forms
------------------------
Every binary operation exists twice: a value form that returns a new
Quaternion (``a + b``, ``a.add(b)``) and an in-place form that writes the
result back into the left operand (``a += b``, ``a.add_in_place(b)``).
The in-place forms mutate only the receiver.

Floating-point semantics
------------------------
Apart from the two cases that raise InvalidArgumentError (sequence
conversion with a length other than 4, and normalize_in_place() on a
zero-length quaternion) all operations follow IEEE-754: dividing by or
inverting a zero-length quaternion yields infinities and NaNs rather than
an exception. numpy's floating-point warnings are silenced for these
operations.

References
----------
    [1] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [2] Diebel, "Representing Attitude: Euler Angles, Unit Quaternions, and
        Rotation Vectors", Stanford, 2006.

===============================================================================
"""

import logging
import numbers
import operator
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Sequence, Union

import numpy as np

from quatcore.constants import (
    COMPONENT_COUNT, COMPONENT_NAMES, DEFAULT_EPSILON, DTYPE,
    STRICT_EQ_TOLERANCE,
)
from quatcore.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

Scalar = Union[float, int, np.floating, np.integer]


def _ieee() -> np.errstate:
    """Context that lets inf/NaN propagate without numpy warnings."""
    return np.errstate(all='ignore')


# =============================================================================
# CONSTRUCTION OPTIONS
# =============================================================================

@dataclass
class QuaternionOptions:
    """
    Named construction options for Quaternion.new().

    Any component left unspecified defaults to 0.0, so an empty record
    describes the zero quaternion.

    Attributes:
        w: Scalar (real) part.
        x: i-component.
        y: j-component.
        z: k-component.
    """
    w: float = 0.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Optional[float]]) -> 'QuaternionOptions':
        """
        Build options from a mapping such as a parsed YAML table.

        Keys mapped to None fall back to 0.0.

        Raises
        ------
        InvalidArgumentError
            If the mapping holds a key other than w, x, y, z, or a value
            that is not a number.
        """
        unknown = sorted(map(str, set(mapping) - set(COMPONENT_NAMES)))
        if unknown:
            raise InvalidArgumentError(
                f"Unrecognized quaternion option(s): {', '.join(unknown)}. "
                f"Recognized options are {', '.join(COMPONENT_NAMES)}."
            )

        values = {}
        for name, value in mapping.items():
            if value is None:
                continue
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                raise InvalidArgumentError(
                    f"Quaternion option '{name}' must be a number, got {value!r}"
                ) from None
        return cls(**values)


# =============================================================================
# QUATERNION
# =============================================================================

class Quaternion:
    """
    Quaternion value with Hamilton algebra.

    Attributes
    ----------
    w : float
        Scalar (real) component.
    x : float
        First imaginary component (i-axis).
    y : float
        Second imaginary component (j-axis).
    z : float
        Third imaginary component (k-axis).

    Examples
    --------
    >>> a = Quaternion(1.0, 2.0, 3.0, 4.0)
    >>> b = Quaternion(2.0, -1.0, -2.0, -3.0)
    >>> print(a * b)
    Quaternion { w: 22.0, x: 2.0, y: 6.0, z: 4.0 }
    >>> print(Quaternion(2.0, 0.0, 0.0, 0.0).normalize())
    Quaternion { w: 1.0, x: 0.0, y: 0.0, z: 0.0 }
    """

    # Mutable and compared with a tolerance, so not usable as a dict key.
    __hash__ = None

    # Make numpy scalars defer to __rmul__ instead of broadcasting.
    __array_ufunc__ = None

    def __init__(self, w: Scalar = 0.0, x: Scalar = 0.0,
                 y: Scalar = 0.0, z: Scalar = 0.0) -> None:
        """
        Initialize a quaternion from its four components.

        Parameters
        ----------
        w, x, y, z : float
            Components, narrowed to float32. Each defaults to 0.0, so
            ``Quaternion()`` is the zero quaternion.
        """
        with _ieee():
            self._q = np.array([w, x, y, z], dtype=DTYPE)

    @classmethod
    def _wrap(cls, components: np.ndarray) -> 'Quaternion':
        """Adopt a length-4 array without copying it."""
        obj = cls.__new__(cls)
        obj._q = components.astype(DTYPE, copy=False)
        return obj

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def w(self) -> float:
        """Scalar (real) part of the quaternion."""
        return float(self._q[0])

    @w.setter
    def w(self, value: Scalar) -> None:
        self._q[0] = value

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[1])

    @x.setter
    def x(self, value: Scalar) -> None:
        self._q[1] = value

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[2])

    @y.setter
    def y(self, value: Scalar) -> None:
        self._q[2] = value

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[3])

    @z.setter
    def z(self, value: Scalar) -> None:
        self._q[3] = value

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """
        Create the identity quaternion [1, 0, 0, 0].

        It is the multiplicative identity: p * identity == p and
        identity * p == p for any quaternion p.
        """
        return Quaternion(1.0, 0.0, 0.0, 0.0)

    @staticmethod
    def zero() -> 'Quaternion':
        """Create the zero quaternion [0, 0, 0, 0]."""
        return Quaternion()

    @classmethod
    def new(cls, options: Union[QuaternionOptions, Mapping, None] = None,
            **overrides: Optional[float]) -> 'Quaternion':
        """
        Create a quaternion from named options.

        Parameters
        ----------
        options : QuaternionOptions or mapping, optional
            Component values; unspecified components default to 0.0.
        **overrides
            Individual components (w, x, y, z), applied on top of options.

        Returns
        -------
        Quaternion
            The zero quaternion when nothing is given.

        Raises
        ------
        InvalidArgumentError
            If an option other than w, x, y, z is supplied, or a
            component value is not a number.
        """
        if options is None:
            opts = QuaternionOptions()
        elif isinstance(options, QuaternionOptions):
            opts = options
        else:
            opts = QuaternionOptions.from_mapping(options)

        if overrides:
            merged = {f.name: getattr(opts, f.name) for f in fields(opts)}
            merged.update({k: v for k, v in overrides.items() if v is not None})
            opts = QuaternionOptions.from_mapping(merged)

        return cls(opts.w, opts.x, opts.y, opts.z)

    @classmethod
    def from_ints(cls, w: int, x: int, y: int, z: int) -> 'Quaternion':
        """
        Create a quaternion from integer components.

        Raises
        ------
        TypeError
            If a component is not an integer.
        """
        return cls(*(float(operator.index(v)) for v in (w, x, y, z)))

    @staticmethod
    def _check_sequence(values: Sequence[float]) -> np.ndarray:
        with _ieee():
            arr = np.asarray(values, dtype=DTYPE)
        if arr.ndim != 1 or arr.shape[0] != COMPONENT_COUNT:
            raise InvalidArgumentError(
                f"Invalid length: expected a sequence of {COMPONENT_COUNT} "
                f"components, got {arr.size} (shape {arr.shape})."
            )
        return arr

    @classmethod
    def from_wxyz(cls, values: Sequence[float]) -> 'Quaternion':
        """
        Create a quaternion from a scalar-first sequence [w, x, y, z].

        Parameters
        ----------
        values : sequence of float
            Exactly four components.

        Returns
        -------
        Quaternion

        Raises
        ------
        InvalidArgumentError
            If values does not hold exactly four elements.
        """
        arr = cls._check_sequence(values)
        return cls._wrap(arr.copy())

    @classmethod
    def from_xyzw(cls, values: Sequence[float]) -> 'Quaternion':
        """
        Create a quaternion from a scalar-last sequence [x, y, z, w].

        This is the ordering used by most graphics libraries. Index 3 is
        the scalar part.

        Raises
        ------
        InvalidArgumentError
            If values does not hold exactly four elements.
        """
        arr = cls._check_sequence(values)
        return cls._wrap(np.roll(arr, 1))

    @staticmethod
    def from_euler_angles(x: float, y: float, z: float) -> 'Quaternion':
        """
        Create a quaternion from Euler angles about X, Y and Z.

        Parameters
        ----------
        x : float
            Rotation about the X-axis (radians).
        y : float
            Rotation about the Y-axis (radians).
        z : float
            Rotation about the Z-axis (radians).

        Returns
        -------
        Quaternion
            Half-angle combination of the three axis rotations. It has
            unit length whenever one of the angles is zero; call
            normalize() on the result if a rotation quaternion is needed.

        Notes
        -----
        The half-angle sines and cosines are evaluated in double precision
        and then narrowed to float32 before being combined:

            w = cx*cy*cz + sx*sy*sz
            x = sx*cy*cz + cx*sy*sz
            y = cx*sy*cz + sx*cy*sz
            z = cx*cy*sz + sx*sy*cz

        This term structure encodes the X-Y-Z order. It is not the 3-2-1
        (ZYX) aerospace sequence; the two only agree for single-axis
        rotations.
        Every cross term is added, so the squared length is
        1 + 8*cx*sx*cy*sy*cz*sz. It differs from 1 unless one of the
        angles is a multiple of pi.
        """
        hx = float(x) / 2.0
        hy = float(y) / 2.0
        hz = float(z) / 2.0

        cx, sx = DTYPE(np.cos(hx)), DTYPE(np.sin(hx))
        cy, sy = DTYPE(np.cos(hy)), DTYPE(np.sin(hy))
        cz, sz = DTYPE(np.cos(hz)), DTYPE(np.sin(hz))

        with _ieee():
            return Quaternion(
                cx * cy * cz + sx * sy * sz,
                sx * cy * cz + cx * sy * sz,
                cx * sy * cz + sx * cy * sz,
                cx * cy * sz + sx * sy * cz,
            )

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    @staticmethod
    def _hamilton(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Hamilton product a (x) b on raw float32 component arrays."""
        aw, ax, ay, az = a
        bw, bx, by, bz = b
        with _ieee():
            return np.array([
                aw * bw - ax * bx - ay * by - az * bz,
                aw * bx + ax * bw + ay * bz - az * by,
                aw * by - ax * bz + ay * bw + az * bx,
                aw * bz + ax * by - ay * bx + az * bw,
            ], dtype=DTYPE)

    def _square_length(self) -> np.float32:
        w, x, y, z = self._q
        with _ieee():
            return w * w + x * x + y * y + z * z

    def _length(self) -> np.float32:
        with _ieee():
            return np.sqrt(self._square_length())

    def _inverse_factor(self) -> np.float32:
        sq = self._square_length()
        if sq == 0.0:
            logger.warning(
                "Inverting a zero-length quaternion; result will contain inf/NaN"
            )
        with _ieee():
            return DTYPE(1.0) / sq

    @staticmethod
    def _as_scalar(t: Scalar) -> np.float32:
        with _ieee():
            return DTYPE(t)

    # =========================================================================
    # ARITHMETIC - value forms
    # =========================================================================

    def add(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise sum."""
        with _ieee():
            return Quaternion._wrap(self._q + other._q)

    def sub(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise difference."""
        with _ieee():
            return Quaternion._wrap(self._q - other._q)

    def neg(self) -> 'Quaternion':
        """Negate all four components."""
        return Quaternion._wrap(-self._q)

    def scale(self, t: Scalar) -> 'Quaternion':
        """
        Multiply every component by the scalar t.

        Parameters
        ----------
        t : float
            Scale factor, narrowed to float32.

        Returns
        -------
        Quaternion
            The scaled quaternion; self is unchanged.
        """
        factor = self._as_scalar(t)
        with _ieee():
            return Quaternion._wrap(self._q * factor)

    def mul(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product self (x) other.

        The product is non-commutative; it composes the rotations
        represented by the two operands.

        Parameters
        ----------
        other : Quaternion
            Right-hand operand.

        Returns
        -------
        Quaternion
        """
        return Quaternion._wrap(self._hamilton(self._q, other._q))

    def div(self, other: 'Quaternion') -> 'Quaternion':
        """
        Quotient self * other.inverse().

        Dividing by a zero-length quaternion does not raise; the result
        carries the inf/NaN values produced by the inverse.
        """
        return self.mul(other.inverse())

    # =========================================================================
    # ARITHMETIC - in-place forms
    # =========================================================================

    def add_in_place(self, other: 'Quaternion') -> None:
        """self <- self + other."""
        with _ieee():
            self._q += other._q

    def sub_in_place(self, other: 'Quaternion') -> None:
        """self <- self - other."""
        with _ieee():
            self._q -= other._q

    def scale_in_place(self, t: Scalar) -> None:
        """self <- self * t for a scalar t."""
        factor = self._as_scalar(t)
        with _ieee():
            self._q *= factor

    def mul_in_place(self, other: 'Quaternion') -> None:
        """self <- self (x) other."""
        self._q[:] = self._hamilton(self._q, other._q)

    def div_in_place(self, other: 'Quaternion') -> None:
        """self <- self * other.inverse()."""
        self._q[:] = self._hamilton(self._q, other.inverse()._q)

    # =========================================================================
    # DERIVED OPERATIONS
    # =========================================================================

    def dot(self, other: 'Quaternion') -> float:
        """
        Four-dimensional dot product.

        Returns
        -------
        float
            aw*bw + ax*bx + ay*by + az*bz
        """
        aw, ax, ay, az = self._q
        bw, bx, by, bz = other._q
        with _ieee():
            return float(aw * bw + ax * bx + ay * by + az * bz)

    def conjugate(self) -> 'Quaternion':
        """
        Quaternion conjugate [w, -x, -y, -z].

        For a unit quaternion the conjugate is also the inverse rotation.
        """
        conj = self._q.copy()
        conj[1:] = -conj[1:]
        return Quaternion._wrap(conj)

    def conjugate_in_place(self) -> None:
        """Negate the vector part in place."""
        self._q[1:] = -self._q[1:]

    def square_length(self) -> float:
        """Squared Euclidean norm w^2 + x^2 + y^2 + z^2."""
        return float(self._square_length())

    def length(self) -> float:
        """Euclidean norm sqrt(w^2 + x^2 + y^2 + z^2)."""
        return float(self._length())

    def inverse(self) -> 'Quaternion':
        """
        Multiplicative inverse conjugate(q) / |q|^2.

        Satisfies q * q.inverse() == identity (within rounding) for any
        quaternion with a non-zero length.

        Returns
        -------
        Quaternion
            The inverse. For a zero-length quaternion the components are
            inf/NaN (IEEE-754 division by zero); no exception is raised.
        """
        return self.conjugate().scale(self._inverse_factor())

    def inverse_in_place(self) -> None:
        """
        Invert in place: scale by 1/|q|^2, then conjugate.

        Same zero-length contract as inverse().
        """
        self.scale_in_place(self._inverse_factor())
        self.conjugate_in_place()

    def normalize(self) -> 'Quaternion':
        """
        Unit quaternion pointing in the same direction.

        Returns
        -------
        Quaternion
            self / |self|. A zero-length quaternion has no direction, in
            which case the identity quaternion is returned instead.
        """
        n = self._length()
        if n == 0.0:
            logger.debug("Normalizing a zero-length quaternion; returning identity")
            return Quaternion.identity()
        with _ieee():
            return self.scale(DTYPE(1.0) / n)

    def normalize_in_place(self) -> None:
        """
        Normalize to unit length in place.

        Unlike normalize(), there is no identity fallback here.

        Raises
        ------
        InvalidArgumentError
            If the quaternion has zero length.
        """
        n = self._length()
        if n == 0.0:
            raise InvalidArgumentError(
                "Cannot normalize a zero-length quaternion in place."
            )
        with _ieee():
            self.scale_in_place(DTYPE(1.0) / n)

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def roughly_eq(self, other: 'Quaternion', epsilon: Optional[float] = None) -> bool:
        """
        Approximate equality on the squared length of the difference.

        Parameters
        ----------
        other : Quaternion
            Quaternion to compare against.
        epsilon : float, optional
            Threshold for |self - other|^2. Defaults to 1e-11.

        Returns
        -------
        bool
            True if |self - other|^2 < epsilon. Always False when either
            operand has a NaN component.
        """
        if epsilon is None:
            epsilon = DEFAULT_EPSILON
        return bool(self.sub(other)._square_length() < epsilon)

    # =========================================================================
    # CONVERSIONS
    # =========================================================================

    def to_wxyz(self) -> np.ndarray:
        """Components as a float32 array [w, x, y, z]."""
        return self._q.copy()

    def to_xyzw(self) -> np.ndarray:
        """Components as a float32 array [x, y, z, w] (scalar last)."""
        return np.roll(self._q, -1)

    def copy(self) -> 'Quaternion':
        """Return an independent copy of this quaternion."""
        return Quaternion._wrap(self._q.copy())

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.add(other)
        return NotImplemented

    def __iadd__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.add_in_place(other)
            return self
        return NotImplemented

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.sub(other)
        return NotImplemented

    def __isub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.sub_in_place(other)
            return self
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        return self.neg()

    def __mul__(self, other: Union['Quaternion', Scalar]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar -> component-wise scaling
        """
        if isinstance(other, Quaternion):
            return self.mul(other)
        elif isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other: Scalar) -> 'Quaternion':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __imul__(self, other: Union['Quaternion', Scalar]) -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.mul_in_place(other)
            return self
        elif isinstance(other, numbers.Real):
            self.scale_in_place(other)
            return self
        return NotImplemented

    def __truediv__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.div(other)
        return NotImplemented

    def __itruediv__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.div_in_place(other)
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        """
        Equality with a vanishingly small tolerance.

        Two quaternions are equal when |self - other|^2 < 1/FLOAT_MAX
        (~2.94e-39). This is almost exact equality for ordinary values but
        is not a bitwise test; NaN components are never equal.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(self.sub(other)._square_length() < STRICT_EQ_TOLERANCE)

    def __repr__(self) -> str:
        return "Quaternion(w={}, x={}, y={}, z={})".format(*map(str, self._q))

    def __str__(self) -> str:
        """
        Human-readable form.

        Format: Quaternion { w: 1.0, x: 0.0, y: 0.0, z: 0.0 }
        """
        return "Quaternion {{ w: {}, x: {}, y: {}, z: {} }}".format(
            *map(str, self._q))


# =============================================================================
# MODULE-LEVEL SHORTCUTS
# =============================================================================

def q(w: float, x: float, y: float, z: float) -> Quaternion:
    """Shorthand for Quaternion(w, x, y, z)."""
    return Quaternion(w, x, y, z)


def qi(w: int, x: int, y: int, z: int) -> Quaternion:
    """Shorthand for Quaternion.from_ints(w, x, y, z)."""
    return Quaternion.from_ints(w, x, y, z)


def identity() -> Quaternion:
    """The identity quaternion [1, 0, 0, 0]."""
    return Quaternion.identity()


def zero() -> Quaternion:
    """The zero quaternion [0, 0, 0, 0]."""
    return Quaternion.zero()


def dot(a: Quaternion, b: Quaternion) -> float:
    """Four-dimensional dot product of a and b."""
    return a.dot(b)
