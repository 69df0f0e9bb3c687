"""
Module ORM Registry (``rent_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table before tables are created.

Also provides ``create_all_tables()`` -- the entry point that registers
all module ORM models and then creates every table.

Architecture position
---------------------
**Modules layer** -- utility.  Imports from sibling ``rent_modules``
packages and from ``rent_kernel.db.engine`` (allowed: modules -> kernel).
MUST NOT be imported by ``rent_kernel`` at module import time.
"""


def import_all_orm_models() -> None:
    """Import every ``rent_modules.*.orm`` module to register ORM models.

    This function is idempotent -- repeated calls are harmless.
    """
    # fmt: off
    import rent_modules.ledger.orm  # noqa: F401
    import rent_modules.receipts.orm  # noqa: F401
    import rent_modules.deposits.orm  # noqa: F401
    import rent_modules.reporting.orm  # noqa: F401
    # fmt: on


def create_all_tables() -> None:
    """Register all module ORM models and create their tables.

    Preconditions:
        Engine must be initialized via ``init_engine_from_url()``.
    """
    from rent_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()
