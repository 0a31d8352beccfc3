"""
MapIt Backend: Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS envelope] → Route Handler

    - Request ID: correlation ID in a ContextVar and the X-Request-ID header
    - Logging:    one access-log line per request, with the request ID
    - CORS:       fixed CORS headers on every response; OPTIONS answered
                  with an empty 200 before routing
"""
