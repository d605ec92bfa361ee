"""Muscle metabolic power estimation for musculoskeletal simulations."""

__version__ = "0.1.0"
