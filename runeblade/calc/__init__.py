"""
Calculation utilities for battle and economy.

Contains:
- Damage and healing arithmetic (pure functions, no side effects)
- Shop odds analysis (numpy)
"""
