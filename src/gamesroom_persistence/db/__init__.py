"""
gamesroom_persistence.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, the batch upsert helper and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in here knows about services; services import from here, never the reverse.
