"""
===============================================================================
QUATCORE - Numeric Constants
===============================================================================
Central repository for the floating-point parameters shared by the
quaternion algebra. All components are stored as IEEE-754 single precision
(numpy.float32); the tolerances below are expressed in that width.
===============================================================================
"""

import numpy as np


# =============================================================================
# STORAGE WIDTH
# =============================================================================
DTYPE = np.float32
FLOAT_MAX = np.finfo(DTYPE).max            # ~3.4028235e38

# =============================================================================
# COMPARISON TOLERANCES
# =============================================================================
# Strict equality threshold on the squared length of the difference.
# 1 / FLOAT_MAX is ~2.94e-39, a float32 subnormal.
STRICT_EQ_TOLERANCE = DTYPE(1.0) / FLOAT_MAX

# Default epsilon for roughly_eq() when the caller does not supply one.
DEFAULT_EPSILON = 1e-11

# =============================================================================
# CONVERSIONS
# =============================================================================
COMPONENT_COUNT = 4
COMPONENT_NAMES = ('w', 'x', 'y', 'z')
DEG2RAD = np.pi / 180.0
