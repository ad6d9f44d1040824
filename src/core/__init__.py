"""
Core domain models, mathematical primitives, result values and settings.

This module contains the foundational building blocks that are independent
of external systems (market data, databases, event buses).
"""
