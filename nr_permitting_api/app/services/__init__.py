"""
Service layer abstraction.

Services encapsulate persistence logic behind an injected storage
handle so that callers never talk to the database directly.
"""
