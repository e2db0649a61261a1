"""
Procedural generation: act maps and shop inventories.
"""
