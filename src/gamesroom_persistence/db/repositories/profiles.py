from __future__ import annotations

from gamesroom_persistence.db.models import Profile
from gamesroom_persistence.db.repositories.base import CrudRepo


class ProfileRepo(CrudRepo[Profile, str]):
    model = Profile
