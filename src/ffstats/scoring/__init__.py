"""Deterministic fantasy-points model."""

from .points import (
    ghost_pts,
    goals_against_pts,
    keeper_pts,
    outfielder_pts,
    points_for_row,
    round_points,
)

__all__ = [
    "ghost_pts",
    "goals_against_pts",
    "keeper_pts",
    "outfielder_pts",
    "points_for_row",
    "round_points",
]
