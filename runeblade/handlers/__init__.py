"""
Handlers for room-phase logic.

Shop Handlers:
- open_shop / close_shop
- buy_card / sell_card / refresh_shop
"""
