"""
Mirath Kernel

Pure domain layer for Islamic inheritance (fara'id) distribution:
- Exact rational arithmetic
- Closed heir-category enumeration
- Immutable estate, share and result value objects
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
