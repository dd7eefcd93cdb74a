"""
Staff token verification (auth) and per-IP limits on anonymous routes
(rate_limit).
"""
