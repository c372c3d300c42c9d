"""
Budget Calendar - Core Package

The data-model and algorithmic core of a personal calendar/budget tracker.
Screens, navigation and gesture animation live outside this package and only
call into it.

DESIGN PRINCIPLES:
1. Local first: every change is durable on this device before anything else
2. Sync is best-effort and never blocks local use
3. Grid generation is pure and deterministic
4. No hidden singletons - components are constructed and injected
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Calendar Team"
