"""Capa HTTP (FastAPI): routers, DTOs y mapeo de errores."""
