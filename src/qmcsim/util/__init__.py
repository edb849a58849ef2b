"""Numerical helpers shared by the generators."""
