"""Cross-record linking of stops: parent stations and transfer rules.

Stops are frozen, so linking builds new stop records and returns a new
mapping rather than mutating the input.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping

from transit_feed.errors import ParentStationNotStationError
from transit_feed.models.gtfs import StationLocation, Stop, TransferRule

logger = logging.getLogger(__name__)


def link_parent_stations(stops: Mapping[str, Stop]) -> dict[str, Stop]:
    """Attach every ordinary stop to its parent station.

    A parent reference that resolves to no stop is ignored and the stop stays
    unlinked. A reference that resolves to an ordinary stop is an error.

    Args:
        stops: Stops keyed by stop_id.

    Returns:
        New mapping in which each station's ``children`` holds its child ids.

    Raises:
        ParentStationNotStationError: If a parent reference names a non-station.
    """
    children: dict[str, set[str]] = defaultdict(set)
    dangling = 0

    for stop in stops.values():
        parent_id = stop.parent_station
        if stop.is_station or not parent_id:
            continue
        parent = stops.get(parent_id)
        if parent is None:
            dangling += 1
            logger.debug(f"Stop {stop.stop_id} names unknown parent station {parent_id}")
            continue
        if not parent.is_station:
            raise ParentStationNotStationError(stop.stop_id, parent_id)
        children[parent_id].add(stop.stop_id)

    if dangling:
        logger.warning(f"{dangling} stops reference a parent station that does not exist")

    linked = dict(stops)
    for station_id, child_ids in children.items():
        station = linked[station_id]
        linked[station_id] = station.model_copy(
            update={"location": StationLocation(children=frozenset(child_ids))}
        )
    return linked


def register_transfers(
    stops: Mapping[str, Stop], rules: Iterable[TransferRule]
) -> dict[str, Stop]:
    """Attach transfer rules to their origin and destination stops.

    Rules whose origin or destination is not a known stop are dropped.

    Returns:
        New mapping with ``outgoing_transfers`` and ``incoming_transfers`` set.
    """
    outgoing: dict[str, list[TransferRule]] = defaultdict(list)
    incoming: dict[str, list[TransferRule]] = defaultdict(list)
    dropped = 0

    for rule in rules:
        if rule.from_stop_id not in stops or rule.to_stop_id not in stops:
            dropped += 1
            continue
        outgoing[rule.from_stop_id].append(rule)
        incoming[rule.to_stop_id].append(rule)

    if dropped:
        logger.warning(f"Dropped {dropped} transfer rules with an unknown stop")

    linked = dict(stops)
    for stop_id in outgoing.keys() | incoming.keys():
        stop = linked[stop_id]
        linked[stop_id] = stop.model_copy(
            update={
                "outgoing_transfers": stop.outgoing_transfers + tuple(outgoing.get(stop_id, ())),
                "incoming_transfers": stop.incoming_transfers + tuple(incoming.get(stop_id, ())),
            }
        )
    return linked
