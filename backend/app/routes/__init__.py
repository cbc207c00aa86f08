# Routes package init
"""
ExportDesk Backend: API Routes Package
======================================

Route Inventory:
    - products.py:           /api/productlist (+ nested variants)
    - freight_rates.py:      /api/freight-rates
    - usd_rate.py:           /api/usd-rate
    - customers.py:          /api/exportcustomerlist
    - customer_products.py:  /api/exportcustomer-products
    - files.py:              /api/files/{bucket}/{name}
    - health.py:             /health

Routes stay thin: they read the request, call one service method and shape
the response. Multipart helpers shared by the upload endpoints live in
uploads.py.
"""
