"""RRSP contribution planner: tax savings and contribution growth projections."""

__version__ = "0.1.0"
