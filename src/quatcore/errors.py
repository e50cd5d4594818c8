"""Exception types raised by quatcore."""


class InvalidArgumentError(ValueError):
    """
    An argument is outside the domain of the requested operation.

    Raised when converting a sequence whose length is not 4, when
    normalizing a zero-length quaternion in place, and for unrecognized
    construction options.
    """
