"""
gamesroom_persistence.services

Service layer.

Responsibilities:
- Own transaction boundaries (commit/rollback) around repository calls.
- Log operations and translate unexpected failures into `PersistenceFailure`.
"""

# Package marker.
