"""Service-ordering backend (accounts, catalog, customer requests, admin panel)."""
