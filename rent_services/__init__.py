"""
rent_services -- Package init and public API.

Responsibility:
    Infrastructure services over the rent kernel and modules: the
    SQLAlchemy-backed record store and data export/import.  This is the
    only layer that holds database sessions.

Architecture position:
    Services -- depends on rent_kernel and rent_modules.
        rent_services/ -> rent_modules/ (allowed)
        rent_services/ -> rent_kernel/  (allowed)
        rent_kernel/   -> rent_services/ (FORBIDDEN)
"""

from rent_services.data_transfer import RentDataExport, RentDataPorter
from rent_services.sql_record_store import SqlRecordStore

__all__ = [
    "RentDataExport",
    "RentDataPorter",
    "SqlRecordStore",
]
