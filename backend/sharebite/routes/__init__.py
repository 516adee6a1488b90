# Routes package init
"""
ShareBite Backend — API Routes Package
========================================

Route Inventory:
    - listings.py:  food listing endpoints (public, authenticated, owner-only)
    - requests.py:  /food-requests (authenticated)
    - health.py:    GET / and GET /health

Routes stay THIN: resolve the caller, call a service, shape the response.
"""
