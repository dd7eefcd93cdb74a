"""
Application services: catalog reads, pricing, order ingestion and status.
"""
