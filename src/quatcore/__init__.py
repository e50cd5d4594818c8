"""
quatcore - quaternion value type with Hamilton algebra.
"""

from quatcore.constants import DEFAULT_EPSILON, FLOAT_MAX, STRICT_EQ_TOLERANCE
from quatcore.errors import InvalidArgumentError
from quatcore.quaternion import (
    Quaternion, QuaternionOptions, dot, identity, q, qi, zero,
)

__version__ = '0.1.0'

__all__ = [
    "DEFAULT_EPSILON",
    "FLOAT_MAX",
    "InvalidArgumentError",
    "Quaternion",
    "QuaternionOptions",
    "STRICT_EQ_TOLERANCE",
    "dot",
    "identity",
    "q",
    "qi",
    "zero",
]
