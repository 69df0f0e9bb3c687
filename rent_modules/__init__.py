"""
Rent Modules.

Orchestration layers over the rent kernel.  Each module contains:
- Domain models (the nouns)
- Workflows (state machines), where the records have a lifecycle
- Configuration schemas
- A service and its ORM mapping

Modules:
- Directory: property/tenant directory contract and in-memory directory
- Ledger: rent payment lifecycle, overdue sweep, monthly generation
- Receipts: one receipt per paid payment
- Deposits: security deposits, deductions, refunds, move-in/move-out
- Reporting: collection reports, analytics, tenant summaries
"""
