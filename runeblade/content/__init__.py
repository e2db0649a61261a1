"""
Content module - Game content data definitions.

Contains cards, status effects, enemies (and their AI), and acts.
"""
