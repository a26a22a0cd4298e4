"""Storefront FastAPI application.

Commands are processed synchronously inside each request; every request is
wrapped in the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from storefront.api import create_app
from storefront.domain import storefront

# Initialized at module level so uvicorn workers share the domain.
# PROTEAN_ENV selects the domain.toml overlay (e.g. "production").
storefront.init()

app = create_app(storefront)
