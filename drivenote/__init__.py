"""
Drive Note activity analytics and recommendation core.

Turns timestamped driving-journal records into derived metrics (route
distance/duration, streaks, safety score) and drives the daily knowledge-card
selection and tag suggestions.
"""

__version__ = "0.1.0"
