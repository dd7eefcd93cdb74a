"""
Table ordering REST API.

Order ingestion, pricing and status tracking for walk-in table orders.
"""

__version__ = "0.1.0"
