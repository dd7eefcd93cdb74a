"""
Database engine and sessions (db) and X-Request-ID propagation
(correlation).
"""
