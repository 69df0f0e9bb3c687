"""
Rent Kernel

Shared foundation for the rent collection ledger:
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
- Injectable clock and calendar arithmetic
- Keyed record store with optimistic version checks
- SQLAlchemy declarative base and engine management
"""

__version__ = "0.1.0"
