# backend/modules/loyalty/__init__.py

"""
Loyalty points ledger and tier classification.

Import the router from ``modules.loyalty.routes.loyalty_routes``; the ledger
service depends on the orders repository, which in turn loads the loyalty
models through this package.
"""
