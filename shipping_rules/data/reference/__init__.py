"""
Shipping Reference Data

Engine defaults (defaults.py) and the bundled sample snapshot (*.csv).
"""
