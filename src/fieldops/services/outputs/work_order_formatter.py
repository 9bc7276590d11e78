"""CSV serialization of exported work orders."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any, Mapping, Sequence

EXPORT_COLUMNS = [
    "Work Order Number",
    "Status",
    "Priority",
    "Customer Name",
    "Customer Phone",
    "Vehicle",
    "Service",
    "Technician",
    "Created Date",
    "Address",
    "Diagnosis",
]

EXPORT_SELECT = (
    "*, "
    "customers (name, phone, customer_type), "
    "vehicles (make, model, year, license_plate), "
    "technicians (name, email, phone)"
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _joined(record: Mapping[str, Any], relation: str) -> Mapping[str, Any]:
    value = record.get(relation)
    return value if isinstance(value, Mapping) else {}


def _vehicle_label(record: Mapping[str, Any]) -> str:
    vehicle = _joined(record, "vehicles")
    if vehicle:
        return " ".join(_text(vehicle.get(part)) for part in ("year", "make", "model"))
    return _text(record.get("vehicleModel"))


def _created_date(value: Any) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return str(value)


def work_order_export_row(record: Mapping[str, Any]) -> list[str]:
    customer = _joined(record, "customers")
    technician = _joined(record, "technicians")
    return [
        _text(record.get("workOrderNumber")),
        _text(record.get("status")),
        _text(record.get("priority")),
        _text(customer.get("name") or record.get("customerName")),
        _text(customer.get("phone") or record.get("customerPhone")),
        _vehicle_label(record),
        _text(record.get("service")),
        _text(technician.get("name")),
        _created_date(record.get("created_at")),
        _text(record.get("customerAddress")),
        _text(record.get("initialDiagnosis")),
    ]


def _quoted_line(cells: Sequence[str]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n").writerow(cells)
    return buffer.getvalue()[:-1]


def work_orders_to_csv(records: Sequence[Mapping[str, Any]]) -> str:
    """Header row as-is, every data cell quoted, rows joined by newlines."""
    lines = [",".join(EXPORT_COLUMNS)]
    lines.extend(_quoted_line(work_order_export_row(record)) for record in records)
    return "\n".join(lines)
