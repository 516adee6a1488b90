# Models package init
"""
ShareBite Backend — ORM Models
================================

    - listing.py:       FoodListing  (food_listings table, JSONB document body)
    - food_request.py:  FoodRequest  (food_requests table)
"""
