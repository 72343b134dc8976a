"""Validation utilities.

This package contains *non-interactive* tooling that checks the numerical
core against references known in closed form.

Design goals
------------
1) Keep validation code out of the GUI path (no UI coupling).
2) Make comparisons reproducible and scriptable (CLI-style entry points).
"""
