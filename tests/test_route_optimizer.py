import pytest

from fieldops.models.domain import Coordinate, Priority, WorkOrder
from fieldops.services.geospatial import distance_km
from fieldops.services.routing.optimizer import (
    calculate_route_stats,
    optimize_route,
    priority_multiplier,
    route_summary,
    routing_warnings,
    validate_for_routing,
)

START = Coordinate(0.0, 0.0)


def _order(oid: str, lat: float | None, lng: float | None, priority: Priority = Priority.MEDIUM) -> WorkOrder:
    coordinate = Coordinate(lat, lng) if lat is not None and lng is not None else None
    return WorkOrder(id=oid, priority=priority, coordinate=coordinate)


def test_priority_multiplier_defaults():
    assert priority_multiplier(Priority.HIGH) == 0.7
    assert priority_multiplier("medium") == 1.0
    assert priority_multiplier("LOW") == 1.3
    assert priority_multiplier("unknown") == 1.0


def test_route_visits_every_located_order_once():
    orders = [
        _order("a", 0, 0.3),
        _order("b", 0.2, 0.1, Priority.HIGH),
        _order("c", -0.1, 0.5, Priority.LOW),
        _order("d", 0.4, 0.4),
        _order("skip", None, None),
    ]
    result = optimize_route(orders, START)

    assert len(result.ordered) == 4
    assert sorted(order.id for order in result.ordered) == ["a", "b", "c", "d"]
    assert len(result.distances) == 4
    assert sum(result.distances) == pytest.approx(result.total_distance_km, abs=1e-9)


def test_segments_chain_from_start():
    orders = [_order("a", 0, 1), _order("b", 0, 2)]
    result = optimize_route(orders, START)

    assert [order.id for order in result.ordered] == ["a", "b"]
    assert result.segments[0].from_coordinate == START
    assert result.segments[1].from_coordinate == orders[0].coordinate
    assert result.distances[0] == pytest.approx(distance_km(START, orders[0].coordinate))


def test_high_priority_pulls_ahead_of_nearer_low_priority():
    high = _order("A", 0, 1, Priority.HIGH)
    low = _order("B", 0, 0.9, Priority.LOW)

    # B is 0.9x as far as A: cost(B) = 1.17 * d(A) against cost(A) = 0.7 * d(A)
    cost_high = distance_km(START, high.coordinate) * 0.7
    cost_low = distance_km(START, low.coordinate) * 1.3
    assert cost_low == pytest.approx(1.17 * distance_km(START, high.coordinate), rel=1e-3)
    assert cost_low > cost_high

    result = optimize_route([low, high], START)

    assert [order.id for order in result.ordered] == ["A", "B"]


def test_much_nearer_low_priority_still_goes_first():
    high = _order("A", 0, 1, Priority.HIGH)
    low = _order("B", 0, 0.5, Priority.LOW)

    # B is half as far as A: cost(B) = 0.65 * d(A) against cost(A) = 0.7 * d(A)
    cost_high = distance_km(START, high.coordinate) * 0.7
    cost_low = distance_km(START, low.coordinate) * 1.3
    assert cost_low == pytest.approx(0.65 * distance_km(START, high.coordinate), rel=1e-3)
    assert cost_low < cost_high

    result = optimize_route([high, low], START)

    assert [order.id for order in result.ordered] == ["B", "A"]


def test_totals_use_actual_distances_not_weighted_costs():
    high = _order("A", 0, 1, Priority.HIGH)
    result = optimize_route([high], START)

    assert result.total_distance_km == pytest.approx(distance_km(START, high.coordinate))
    # 111.19 km at 40 km/h
    assert result.estimated_minutes == 167


def test_ties_keep_input_order():
    first = _order("first", 0, 1)
    second = _order("second", 1, 0)

    result = optimize_route([first, second], START)

    assert result.ordered[0].id == "first"


def test_single_order_route():
    order = _order("only", 0, 0.1)
    result = optimize_route([order], START)

    assert result.ordered == [order]
    assert len(result.segments) == 1


def test_empty_input_yields_empty_route():
    result = optimize_route([], START)

    assert result.ordered == []
    assert result.total_distance_km == 0
    assert result.estimated_minutes == 0


def test_no_located_orders_returns_input_unchanged():
    orders = [_order("x", None, None), _order("y", None, None)]
    result = optimize_route(orders, START)

    assert result.ordered == orders
    assert result.segments == []
    assert result.total_distance_km == 0


def test_custom_multipliers_override_defaults():
    high = _order("A", 0, 1, Priority.HIGH)
    low = _order("B", 0, 0.9, Priority.LOW)

    result = optimize_route([high, low], START, priority_multipliers={"high": 1.0, "low": 1.0})

    assert [order.id for order in result.ordered] == ["B", "A"]


def test_validate_for_routing_partitions_orders():
    located = _order("a", 0, 1)
    unlocated = _order("b", None, None)
    validation = validate_for_routing([located, unlocated])

    assert validation.valid == [located]
    assert validation.invalid == [unlocated]
    assert validation.has_valid_orders


def test_routing_warnings():
    orders = [_order(f"WO{i}", 0, 0.01 * i) for i in range(1, 27)] + [_order("none", None, None)]
    warnings = routing_warnings(orders)

    assert warnings == [
        "1 work orders will be excluded due to missing location data",
        "Large number of work orders may result in suboptimal routing",
    ]
    assert routing_warnings([_order("a", 0, 1)]) == []


def test_stats_and_summary():
    result = optimize_route([_order("a", 0, 0.1), _order("b", 0, 0.2)], START)
    stats = calculate_route_stats(result)

    assert stats.total_stops == 2
    assert stats.average_distance_between_stops_km == pytest.approx(result.total_distance_km / 2)
    assert stats.formatted_distance == "22km"
    assert route_summary(stats) == f"2 work orders • 22km • {stats.formatted_time}"


def test_summary_singular_and_empty():
    single = calculate_route_stats(optimize_route([_order("a", 0, 0.01)], START))
    empty = calculate_route_stats(optimize_route([], START))

    assert route_summary(single).startswith("1 work order • ")
    assert route_summary(empty) == "No work orders selected for routing"
    assert empty.average_distance_between_stops_km == 0
