"""API routers, one module per concern, included by ``meetingintel.main``."""
