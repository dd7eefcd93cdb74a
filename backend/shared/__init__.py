"""
Code shared by the ordering API and the operator CLI.

    shared.config          settings, logging, constants
    shared.infrastructure  database sessions, request IDs
    shared.security        staff JWT verification, rate limits
    shared.utils           exceptions, schemas, health probes
"""
