"""
gamesroom_persistence.observability

Observability package.

Responsibilities:
- Structured logging configuration.
"""

# Package marker.
