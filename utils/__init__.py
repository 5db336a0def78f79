"""utils package – Reusable helper functions."""

from .helpers import clamp, default_curve, linear_curve
