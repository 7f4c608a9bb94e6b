"""Edit/delete access checks on places and the place view annotation."""
from typing import Iterable, List, Optional

from wayfarer.application.context import Context
from wayfarer.domain.models.place import Place, PlaceView


async def can_edit_place(context: Context, place: Place, user_id: Optional[str]) -> bool:
    """Creator, or holder of an accepted permission with ``can_edit``."""
    if not user_id:
        return False
    if place.is_owned_by(user_id):
        return True
    permission = await context.place_permissions.find_by_user_and_place(user_id, place.id)
    return permission is not None and permission.is_accepted() and permission.can_edit


async def can_delete_place(context: Context, place: Place, user_id: Optional[str]) -> bool:
    """Creator, or holder of an accepted permission with ``can_delete``."""
    if not user_id:
        return False
    if place.is_owned_by(user_id):
        return True
    permission = await context.place_permissions.find_by_user_and_place(user_id, place.id)
    return permission is not None and permission.is_accepted() and permission.can_delete


async def build_place_views(context: Context, places: Iterable[Place],
                            user_id: Optional[str]) -> List[PlaceView]:
    places = list(places)
    if not user_id:
        return [PlaceView(place=place) for place in places]

    favorites = {fav.place_id for fav in await context.place_favorites.find_by_user(user_id)}
    granted = {
        permission.place_id: permission
        for permission in await context.place_permissions.find_by_user(user_id)
        if permission.is_accepted()
    }
    views = []
    for place in places:
        owner = place.is_owned_by(user_id)
        permission = granted.get(place.id)
        views.append(PlaceView(
            place=place,
            is_favorited=place.id in favorites,
            has_edit_permission=owner or bool(permission and permission.can_edit),
            has_delete_permission=owner or bool(permission and permission.can_delete),
        ))
    return views
