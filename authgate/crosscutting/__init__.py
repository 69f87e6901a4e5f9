"""Concerns transversales: config, logging, errores, middleware."""
