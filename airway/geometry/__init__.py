"""Geometry engine -- public API re-exports.

Usage::

    from airway.geometry import solve, solve_checked
"""

from __future__ import annotations

from airway.geometry.solver import (
    check_domain,
    solve,
    solve_checked,
)

__all__ = [
    "check_domain",
    "solve",
    "solve_checked",
]
