# Middleware package init
"""
ExportDesk Backend: Middleware Package
======================================

Cross-cutting concerns applied to every request.

Middleware chain (outermost first):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

The request ID is assigned before the access log line is written, so both the
log line and any error body carry the same ID.
"""
