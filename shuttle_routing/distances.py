from typing import Dict, List, Optional

from .matching import DEFAULT_BOOKING_TOKEN, booking_id_from_visit
from .models import Transition, Visit, VisitDistance


def arriving_transition(visit: Visit, transitions: List[Transition]) -> Optional[Transition]:
    """Return the transition whose end time lines up with the visit's start time."""
    for transition in transitions:
        if transition.start_time + transition.total_duration == visit.start_time:
            return transition
    return None


def cumulative_distances(
    dropoff_visits: List[Visit],
    transitions: List[Transition],
    token: str = DEFAULT_BOOKING_TOKEN,
) -> Dict[int, VisitDistance]:
    """
    Attribute traveled distance to each drop-off, in solver order.

    Returns a mapping of booking id to the running distance total at that
    stop. A visit with no arriving transition (e.g. reached straight from the
    vehicle start) gets no entry; callers read a missing entry as zero.
    """
    cumulative = 0.0
    distances_by_visit = {}

    for index, visit in enumerate(dropoff_visits):
        transition = arriving_transition(visit, transitions)
        if transition is None:
            continue

        cumulative += transition.travel_distance_meters
        distances_by_visit[booking_id_from_visit(visit, token)] = VisitDistance(
            visit_index=index,
            distance_meters=cumulative,
        )

    return distances_by_visit


def distance_for(distances: Dict[int, VisitDistance], booking_id: int) -> float:
    entry = distances.get(booking_id)
    return entry.distance_meters if entry else 0
