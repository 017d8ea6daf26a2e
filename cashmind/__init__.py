"""
CashMind - Source Package

A personal finance tracker: record expenses, plan a monthly budget,
see where the money went, and back expenses up to a remote API.

DESIGN PRINCIPLES:
1. The local store is the source of truth
2. Nothing is persisted until an explicit save
3. Failures are reported as results, never as crashes
4. Every mutation is auditable
5. Store and sync client are injected, never global
"""

__version__ = "1.0.0"
__author__ = "CashMind Team"
