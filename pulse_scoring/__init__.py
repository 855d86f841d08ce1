"""
Pulse scoring — composite scores, tiers, trends, and cross-risk for student
and teacher wellbeing analytics.

Pure computation over already-fetched signal values: normalize, weight,
classify. Data access, rendering, and persistence live outside this package.
"""

__version__ = "0.1.0"
