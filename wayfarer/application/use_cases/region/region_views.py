"""Annotate regions with the acting user's favorite and pin state."""
import logging
from typing import Iterable, List, Optional

from wayfarer.application.context import Context
from wayfarer.domain.models.region import Region, RegionView
from wayfarer.domain.repositories.errors import RepositoryError

logger = logging.getLogger(__name__)


async def build_region_views(context: Context, regions: Iterable[Region],
                             user_id: Optional[str]) -> List[RegionView]:
    regions = list(regions)
    if not user_id:
        return [RegionView(region=region) for region in regions]

    favorites = {fav.region_id for fav in await context.region_favorites.find_by_user(user_id)}
    pins = {pin.region_id: pin.display_order for pin in await context.region_pins.find_by_user(user_id)}
    return [
        RegionView(
            region=region,
            is_favorited=region.id in favorites,
            is_pinned=region.id in pins,
            pin_display_order=pins.get(region.id),
        )
        for region in regions
    ]


async def record_region_visits(context: Context, regions: Iterable[Region]) -> None:
    """Bump visit counters of returned regions. Counter failures never fail the read."""
    for region in regions:
        try:
            await context.regions.increment_visit_count(region.id)
        except RepositoryError as exc:
            logger.warning(f"Could not record visit for region {region.id}: {exc.message}")
