"""Compatibility matching exports."""

from .scoring import MATCH_THRESHOLD, MAX_SCORE, rank, score
from .service import MatchService

__all__ = ["MATCH_THRESHOLD", "MAX_SCORE", "MatchService", "rank", "score"]
