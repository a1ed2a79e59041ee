"""
Location builder: one canonical Location per configured restaurant.
"""

from typing import Dict, List, Optional, Tuple

from src.models.canonical import Location, new_id
from src.models.config import LocationConfig
from src.models.sources import DoorDashStore, SourceData, SquareLocation, ToastLocation
from src.utils.logging_config import logger

DEFAULT_TIMEZONE = "America/New_York"


def _square_address(location: SquareLocation) -> Optional[Dict[str, Optional[str]]]:
    if not location.address:
        return None
    return {
        'line1': location.address.address_line_1,
        'city': location.address.locality,
        'state': location.address.administrative_district_level_1,
        'zip': location.address.postal_code,
        'country': location.address.country,
    }


def _toast_address(location: ToastLocation) -> Optional[Dict[str, Optional[str]]]:
    if not location.address:
        return None
    return {
        'line1': location.address.line1,
        'city': location.address.city,
        'state': location.address.state,
        'zip': location.address.zip,
        'country': location.address.country,
    }


def _doordash_address(store: DoorDashStore) -> Optional[Dict[str, Optional[str]]]:
    if not store.address:
        return None
    return {
        'line1': store.address.street,
        'city': store.address.city,
        'state': store.address.state,
        'zip': store.address.zip_code,
        'country': store.address.country,
    }


def build_locations(
    sources: SourceData, location_configs: List[LocationConfig]
) -> Tuple[List[Location], Dict[str, str]]:
    """
    Creates one Location per config entry.

    Address and timezone come from the Square location when present (the most
    complete export), then Toast, then DoorDash.

    Returns:
        (locations, location_map) where location_map sends each configured vendor
        id to the canonical location id.
    """
    square_locations = {loc.id: loc for loc in sources.square.locations.locations}
    toast_locations = {loc.guid: loc for loc in sources.toast.locations}
    doordash_stores = {store.store_id: store for store in sources.doordash.stores}

    locations: List[Location] = []
    location_map: Dict[str, str] = {}

    for config in location_configs:
        square_loc = square_locations.get(config.square_id)
        toast_loc = toast_locations.get(config.toast_id)
        dd_store = doordash_stores.get(config.doordash_id)

        address = None
        timezone = None
        if square_loc:
            address, timezone = _square_address(square_loc), square_loc.timezone
        if toast_loc:
            address = address or _toast_address(toast_loc)
            timezone = timezone or toast_loc.timezone
        if dd_store:
            address = address or _doordash_address(dd_store)
            timezone = timezone or dd_store.timezone

        location = Location(
            id=new_id(),
            name=config.name,
            address=address,
            timezone=timezone or DEFAULT_TIMEZONE,
            toast_id=config.toast_id,
            doordash_id=config.doordash_id,
            square_id=config.square_id,
            raw_data={
                'config': config.model_dump(),
                'square_location': square_loc.raw() if square_loc else None,
            },
        )
        locations.append(location)

        for key in (config.toast_id, config.doordash_id, config.square_id):
            location_map[key] = location.id

    logger.info(f"Built {len(locations)} locations")
    return locations, location_map
