"""
HVAC operations data layer

Client for the spreadsheet-backed store of customers, projects, equipment,
work days, payments, photos and users, plus the rollups and schedule views
computed from them.
"""

__version__ = '1.0.0'
