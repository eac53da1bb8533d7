"""
repokit.db

Engine and transaction helpers (SQLAlchemy async).
"""

# Package marker.
