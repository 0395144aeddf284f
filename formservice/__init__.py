"""FastAPI application package for the Form Service.

Exposes the application factory. Conditional visibility and response
validation live in `formservice/logic/`; route handlers in
`formservice/routes/`.
"""

from __future__ import annotations

from formservice.main import create_app

__all__ = ["create_app"]
