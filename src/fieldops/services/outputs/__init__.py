"""Serializers for route outputs and work order exports."""

from .routing_formatter import route_result_to_csv, route_result_to_json
from .work_order_formatter import EXPORT_COLUMNS, work_orders_to_csv

__all__ = [
    "EXPORT_COLUMNS",
    "route_result_to_csv",
    "route_result_to_json",
    "work_orders_to_csv",
]
