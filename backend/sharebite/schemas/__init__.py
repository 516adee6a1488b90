# Schemas package init
"""
ShareBite Backend — API Schemas
=================================

    - common.py:        write acknowledgements, errors, liveness, health
    - listing.py:       donor profile
    - food_request.py:  stored food request (camelCase wire keys)
"""
