"""Casos de uso (auth + gestión de usuarios)."""
