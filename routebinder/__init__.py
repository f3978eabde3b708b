"""Declarative route binding for FastAPI controllers.

Controllers declare their routes in a table of RouteMetadata entries; the
binder scans them at startup, builds each route's dependency chain (OAuth,
server-sent events, user injection, uploads) and dispatches every request
through a timeout-guarded handler that always answers with JSON.

Usage:
    from routebinder.main import create_app

    app = create_app()
"""

__version__ = "0.1.0"
