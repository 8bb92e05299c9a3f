"""
GlickoTR - Tennis Rating Engine

Glicko-2 ratings for head-to-head tennis matches, driven by the share of
games each player won rather than by win/loss alone.

Main components:
- glicko: Rating calculation (scales, expectations, weighting, volatility solver)
- scoring: Score string parsing and game totals
- db: Player profile and match models
- services: Applying a confirmed match to both player profiles
"""

__version__ = "0.1.0"
