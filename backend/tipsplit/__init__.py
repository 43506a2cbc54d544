"""
SPLIT tip calculator: bill splitting with a persisted history and admin dashboard
"""
__version__ = "0.1.0"
