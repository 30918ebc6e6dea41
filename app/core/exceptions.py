"""
Exceptions customizadas do painel.

Serviços de aplicação lançam apenas estas exceções; a conversão para
HTTP fica em app.api.error_handlers.
"""
from typing import Optional


class PainelException(Exception):
    """Base exception para todos os erros do sistema."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class DatabaseError(PainelException):
    """Erro de banco de dados (Supabase)."""
    pass


class ValidationError(PainelException):
    """Erro de validacao de dados de entrada."""
    pass


class NotFoundError(PainelException):
    """Recurso nao encontrado."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None
    ):
        message = f"{resource} nao encontrado"
        details = {}
        if identifier:
            details["id"] = identifier
        super().__init__(message, details)


class AuthenticationError(PainelException):
    """Assinatura ou credencial invalida."""
    pass


class ConfigurationError(PainelException):
    """Erro de configuracao do sistema."""
    pass
