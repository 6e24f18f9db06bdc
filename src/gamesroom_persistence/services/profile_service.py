from __future__ import annotations

from gamesroom_persistence.db.models import Profile
from gamesroom_persistence.db.repositories.profiles import ProfileRepo
from gamesroom_persistence.services.base import EntityService


class ProfileService(EntityService[Profile, str]):
    # USER_ID is chosen by the caller; nothing is generated.
    entity_name = "profile"
    repo_class = ProfileRepo
    id_attribute = "user_id"
