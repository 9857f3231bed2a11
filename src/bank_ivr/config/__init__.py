"""Configurações centralizadas do bank_ivr.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única

Uso típico:
    from bank_ivr.config import get_settings
"""

from bank_ivr.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
