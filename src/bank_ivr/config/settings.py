"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou .env em dev).
Credenciais de clientes nunca passam por aqui.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações do serviço IVR lidas do ambiente.

    Nomes das env vars = nomes dos campos em maiúsculas
    (ex: SESSION_IDLE_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "bank_ivr"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Sessão (registro em memória, sem persistência entre restarts)
    session_idle_timeout_seconds: float = 300.0  # Inatividade até expulsão
    session_sweep_interval_seconds: float = 30.0  # Período da varredura
    session_sweeper_enabled: bool = True  # Desabilitar em testes

    # Backend de autenticação
    auth_backend: str = "memory"  # memory (dados de demonstração)
    auth_timeout_seconds: float = 5.0  # Orçamento por chamada ao backend
    auth_max_workers: int = 8  # Threads dedicadas às chamadas ao backend

    def validate_session_config(self) -> list[str]:
        """Valida parâmetros do registro de sessões.

        Retorna lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if self.session_idle_timeout_seconds <= 0:
            errors.append("SESSION_IDLE_TIMEOUT_SECONDS deve ser > 0")
        if self.session_sweep_interval_seconds <= 0:
            errors.append("SESSION_SWEEP_INTERVAL_SECONDS deve ser > 0")
        if (
            self.session_sweeper_enabled
            and self.session_sweep_interval_seconds > self.session_idle_timeout_seconds
        ):
            errors.append(
                "SESSION_SWEEP_INTERVAL_SECONDS não pode exceder SESSION_IDLE_TIMEOUT_SECONDS"
            )
        return errors

    def validate_auth_config(self) -> list[str]:
        """Valida backend de autenticação e orçamento de tempo."""
        errors: list[str] = []
        backend = self.auth_backend.lower()
        valid_backends = {"memory"}

        if backend not in valid_backends:
            errors.append(
                f"AUTH_BACKEND '{backend}' inválido. Valores válidos: {valid_backends}"
            )

        if backend == "memory" and self.is_production:
            errors.append(
                "AUTH_BACKEND=memory é proibido em produção (dados de demonstração)."
            )

        if self.auth_timeout_seconds <= 0:
            errors.append("AUTH_TIMEOUT_SECONDS deve ser > 0")
        if self.auth_max_workers < 1:
            errors.append("AUTH_MAX_WORKERS deve ser >= 1")
        return errors

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings do processo (lido uma vez; testes usam `cache_clear`)."""
    return Settings()
