# Stores package init
"""
ShareBite Backend — Persistence Interfaces
============================================

What:  The ListingStore / RequestStore contracts and their SQLAlchemy implementations.
Why:   Services depend on the abstract stores only. main.create_app() decides
       which implementation backs them (SQL in production, in-memory in tests).

    - base.py:  ListingStore, RequestStore (abstract)
    - sql.py:   SQLListingStore, SQLRequestStore (async SQLAlchemy)
"""
