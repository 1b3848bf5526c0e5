"""
Scripts for MedAlert
Utility scripts for seeding and scheduled runs
"""

from .seed_data import seed_all, create_tables

__all__ = [
    "seed_all",
    "create_tables"
]
