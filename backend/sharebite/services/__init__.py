# Services package init
"""
ShareBite Backend — Services Layer
====================================

What:  Business rules between the routes (HTTP) and the stores (persistence).

Service Inventory:
    - identity.py:           CallerIdentity + IdentityVerifier (abstract)
    - firebase_identity.py:  FirebaseIdentityVerifier (firebase-admin ID tokens)
    - access_policy.py:      AccessPolicy — public / authenticated / owner-only
    - identifiers.py:        well-formedness check for path and body ids
    - listing_service.py:    ListingService — listing lifecycle
    - request_service.py:    RequestService — food request lifecycle
"""
