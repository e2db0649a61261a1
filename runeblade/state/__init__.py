"""
State module - Game state management and RNG.

Contains:
- RNG system (XorShift128, seed management)
- Battle state (player, enemy, piles, log)
- Player collection and run progress
"""
