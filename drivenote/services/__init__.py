"""
Service layer.

- analytics: route metrics, streaks, safety score, driving stats
- knowledge: daily knowledge card selection
- tag_service: tag usage frequency and suggestions
- drive_service: drive route lifecycle
"""
