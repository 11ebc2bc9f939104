# worley_noise/errors.py

"""Exceptions raised by the noise engine."""


class DegenerateGridError(ValueError):
    """
    The grid has no usable extent: a dimension is <= 0 (e.g. a minimized
    window) or the derived max_distance is zero. The engine recovers from this
    by publishing an empty field until the grid is usable again.
    """


class InvalidScaleConfigurationError(ValueError):
    """An unknown scale kind or unusable scale parameters were supplied."""
