"""Presentation layer - HTTP binding of controllers.

Structure:
- routing/: Route scanning, middleware chain, dispatcher, binder
- controllers/: Controllers with their route tables
- errors/: Fallback handlers (404 and global error responder)
- middleware/: ASGI middleware (trace IDs)

The presentation layer translates HTTP to controller calls and controller
results back to HTTP; it contains NO business logic.
"""
