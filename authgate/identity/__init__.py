"""Identidad: passwords, tokens, sesión, guards y pipeline de autorización."""
