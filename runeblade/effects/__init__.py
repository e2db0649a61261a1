"""
Card and status effect resolution.

Main Components:
- executor: pays for a card and dispatches its CardEffect records
- status: turn-start ticking of status effects
"""
