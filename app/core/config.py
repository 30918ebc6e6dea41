"""
Configurações da aplicação.
Carrega variáveis de ambiente.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Configurações carregadas do .env"""

    # App
    APP_NAME: str = "Painel de Campanhas WhatsApp"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""

    # Webhook de status de entrega
    # Vazio = aceita sem assinatura (apenas loga warning)
    WEBHOOK_SECRET: str = ""

    # CORS - origens permitidas (separadas por vírgula)
    CORS_ORIGINS: str = "*"  # "*" apenas para desenvolvimento

    @property
    def is_production(self) -> bool:
        """Retorna True se está em produção."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Retorna lista de origens CORS permitidas.

        Em produção, deve ser configurado explicitamente.
        """
        if self.CORS_ORIGINS == "*":
            if self.is_production:
                import logging
                logging.warning(
                    "CORS_ORIGINS='*' em produção. "
                    "Configure origens específicas para maior segurança."
                )
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignora variáveis extras do .env


class AnalyticsConfig:
    """
    Constantes de consulta de métricas.

    PostgREST limita respostas a 1000 linhas por padrão; contagens usam
    count exato e listagens são paginadas nesse tamanho.
    """

    PAGE_SIZE: int = 1000

    # Retry das consultas de contagem
    MAX_TENTATIVAS: int = 3
    BACKOFF_MAX_SEGUNDOS: int = 30

    # Status considerados "na fila" no log de mensagens
    STATUS_FILA: tuple = ("fila", "pendente", "processando")
    STATUS_FILA_EVENTO: tuple = ("queued", "pending", "processing")
    STATUS_ENTREGUE_EVENTO: tuple = ("sent", "delivered")


@lru_cache()
def get_settings() -> Settings:
    """Retorna instância cacheada das configurações."""
    return Settings()


settings = get_settings()
