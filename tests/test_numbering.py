import dataclasses

from conftest import make_waypoints

from trip_router.models.trip import Coordinate, Waypoint
from trip_router.services.numbering import included_waypoints, renumber


def test_renumber_assigns_dense_sequence_in_collection_order():
    waypoints = make_waypoints(5, included=[True, False, True, True, False])

    renumber(waypoints)

    included = included_waypoints(waypoints)
    assert [wp.number for wp in included] == [1, 2, 3]
    assert [wp.name for wp in included] == ["Place 1", "Place 3", "Place 4"]


def test_renumber_leaves_excluded_numbers_untouched():
    waypoints = make_waypoints(3)
    renumber(waypoints)
    assert [wp.number for wp in waypoints] == [1, 2, 3]

    waypoints[1].included = False
    renumber(waypoints)

    assert waypoints[0].number == 1
    assert waypoints[1].number == 2  # stale, never shown
    assert waypoints[2].number == 2


def test_renumber_after_toggle_back_restores_position():
    waypoints = make_waypoints(4, included=[False, True, True, True])
    renumber(waypoints)
    assert [wp.number for wp in waypoints[1:]] == [1, 2, 3]

    waypoints[0].included = True
    renumber(waypoints)

    assert [wp.number for wp in waypoints] == [1, 2, 3, 4]


def test_renumber_keeps_identity():
    waypoints = make_waypoints(2)
    ids = [wp.id for wp in waypoints]

    waypoints[0].name = "Renamed"
    result = renumber(waypoints)

    assert result is waypoints
    assert [wp.id for wp in result] == ids


def test_renumber_empty_collection():
    assert list(renumber([])) == []


def test_waypoint_carries_only_itinerary_state():
    waypoint = Waypoint(name="Kremlin", coordinate=Coordinate(56.33, 44.0))

    assert [f.name for f in dataclasses.fields(Waypoint)] == [
        "name",
        "coordinate",
        "included",
        "number",
        "id",
    ]
    assert waypoint.included is True
    assert waypoint.number == 0
