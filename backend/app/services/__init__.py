# Services package init
"""
ExportDesk Backend: Services Layer
==================================

Business logic between the routes (HTTP) and the database (persistence).
Each service is a stateless class with a module-level singleton; the session
is passed in per call.

Service Inventory:
    - ProductService:          products and the nested Variant Store
    - FreightRateService:      freight rates and their day/latest lookups
    - UsdRateService:          USD exchange rate history
    - CustomerService:         export customers and their pictures
    - CustomerProductService:  per-customer price lists
    - FileService:             image validation, storage and cleanup
"""
