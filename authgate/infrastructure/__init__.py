"""Adapters de infraestructura (DB, repositorios, email)."""
