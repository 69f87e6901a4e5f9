"""authgate: backend HTTP de autenticación JWT y autorización por rol / tenant."""

__version__ = "0.1.0"
