"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (puertos)

Reglas:
    - Solo re-exporta contratos del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .repositories import UserRepository
from .services import Mailer

__all__ = ["UserRepository", "Mailer"]
