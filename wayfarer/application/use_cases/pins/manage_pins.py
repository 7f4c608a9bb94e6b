"""
Manage Pins Use Cases
=====================

Pinned regions keep a dense, zero-based ``display_order`` per user.
"""
import logging
from typing import List, Optional

from wayfarer.application.context import Context
from wayfarer.application.use_cases.region.region_views import build_region_views
from wayfarer.domain.models.region import RegionPin, RegionView
from wayfarer.domain.result import Ok, Result, conflict, not_found, validation_error

logger = logging.getLogger(__name__)


class PinRegionUseCase:
    """
    Pin a region.

    Without ``display_order`` the pin is appended after the last one;
    otherwise it is inserted at that position and later pins shift down.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str,
                      display_order: Optional[int] = None) -> Result[RegionPin]:
        if display_order is not None and display_order < 0:
            return validation_error("Display order must be zero or greater")
        if await self._context.regions.find_by_id(region_id) is None:
            return not_found("Region", region_id)
        if await self._context.region_pins.find_by_user_and_region(user_id, region_id):
            return conflict("Region is already pinned")

        if display_order is None:
            last = await self._context.region_pins.get_max_display_order(user_id)
            display_order = 0 if last is None else last + 1
        pin = await self._context.region_pins.add(user_id, region_id, display_order)
        logger.info(f"Region {region_id} pinned by {user_id} at {pin.display_order}")
        return Ok(pin)


class UnpinRegionUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_id: str) -> Result[bool]:
        if await self._context.region_pins.find_by_user_and_region(user_id, region_id) is None:
            return not_found("Region pin", region_id)
        await self._context.region_pins.remove(user_id, region_id)
        return Ok(True)


class ReorderPinnedRegionsUseCase:
    """
    Apply a new pin order.

    Listed regions take positions 0..k-1 in the given order; pins left out
    keep their relative order after them.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str, region_ids: List[str]) -> Result[List[RegionPin]]:
        if len(set(region_ids)) != len(region_ids):
            return validation_error("Region ids must not contain duplicates")

        pinned = {pin.region_id for pin in await self._context.region_pins.find_by_user(user_id)}
        for region_id in region_ids:
            if region_id not in pinned:
                return not_found("Region pin", region_id)

        return Ok(await self._context.region_pins.reorder(user_id, region_ids))


class ListPinnedRegionsUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, user_id: str) -> Result[List[RegionView]]:
        regions = []
        for pin in await self._context.region_pins.find_by_user(user_id):
            region = await self._context.regions.find_by_id(pin.region_id)
            if region is not None:
                regions.append(region)
        return Ok(await build_region_views(self._context, regions, user_id))
