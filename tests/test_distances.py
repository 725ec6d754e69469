from shuttle_routing.distances import arriving_transition, cumulative_distances, distance_for
from shuttle_routing.models import Transition, Visit
from shuttle_routing.views import dropoffs

from conftest import make_booking, serial_route


def test_cumulative_distance_follows_arriving_transitions(route):
    distances = cumulative_distances(dropoffs(route), route.transitions)

    assert distances[1].distance_meters == 4000
    assert distances[1].visit_index == 0
    assert distances[2].distance_meters == 10000
    assert distances[2].visit_index == 1


def test_first_stop_without_transition_has_no_entry():
    first = Visit(shipment_label="Booking 5", is_pickup=False, start_time=100, passengers=-1)
    second = Visit(shipment_label="Booking 6", is_pickup=False, start_time=700, passengers=-1)
    transitions = [Transition(start_time=100, total_duration=600, travel_distance_meters=2500)]

    distances = cumulative_distances([first, second], transitions)

    assert 5 not in distances
    assert distance_for(distances, 5) == 0
    assert distance_for(distances, 6) == 2500


def test_cumulative_distance_is_non_decreasing():
    bookings = [make_booking(f"Booking {i}") for i in range(1, 6)]
    route = serial_route(bookings, leg_meters=750.0)

    distances = cumulative_distances(dropoffs(route), route.transitions)
    totals = [distances[i].distance_meters for i in range(1, 6)]

    assert totals == sorted(totals)
    assert totals == [750.0, 1500.0, 2250.0, 3000.0, 3750.0]


def test_arriving_transition_picks_first_match():
    visit = Visit(shipment_label="1", is_pickup=False, start_time=60, passengers=-1)
    first = Transition(start_time=0, total_duration=60, travel_distance_meters=10)
    second = Transition(start_time=30, total_duration=30, travel_distance_meters=20)

    assert arriving_transition(visit, [first, second]) is first
    assert arriving_transition(visit, []) is None
