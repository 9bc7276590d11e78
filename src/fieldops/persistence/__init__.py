"""Record store and file persistence."""

from .filesystem import ExportSink, FileStorage
from .work_orders import SupabaseWorkOrderStore, WorkOrderStore, get_work_order_store

__all__ = [
    "ExportSink",
    "FileStorage",
    "SupabaseWorkOrderStore",
    "WorkOrderStore",
    "get_work_order_store",
]
