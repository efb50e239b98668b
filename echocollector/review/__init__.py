"""
Review engines for Financial Echo Collector.

Chains, insights and browsing over a read-only echo snapshot.
"""

from echocollector.review.chains import Chain, build_chains
from echocollector.review.insights import Insights, StrengthTrend, compute_insights
from echocollector.review.browse import EchoFilter, EchoSort, filter_and_sort

__all__ = [
    "Chain",
    "build_chains",
    "Insights",
    "StrengthTrend",
    "compute_insights",
    "EchoFilter",
    "EchoSort",
    "filter_and_sort",
]
