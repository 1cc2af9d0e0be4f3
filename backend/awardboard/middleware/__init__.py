# Middleware package init
"""
AwardBoard Backend - Middleware Package
=========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → [GZip] → [Award Pipeline] → Route Handler

    1. Request ID: correlation ID for every log line and the response header
    2. Access Log: reads the award code and requester after the pipeline ran
    3. GZip: compresses award pages and JSON bodies
    4. Award Pipeline: identity restore, guards, handler, fallback, recorder,
       responder
"""
