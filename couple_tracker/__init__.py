"""
Couple Tracker - Source Package

Shared life tracker for couples. The document store, authentication and
rendering are provided by the hosting platform; this package holds the
logic behind the "Important Dates" feature.

DESIGN PRINCIPLES:
1. "today" is an input, never read inside the engine
2. Derived views are recomputed on every call
3. Corrupt stored dates are left out of views, never crash them
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Couple Tracker Team"
