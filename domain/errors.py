from __future__ import annotations


class ConfigurationError(ValueError):
    """Parâmetro de inicialização inválido ou ausente. Fatal antes do loop."""


class PublishError(RuntimeError):
    """
    Um evento não chegou ao sink (falha de rede ou resposta não-2xx).
    Recuperável: o loop registra e segue para o próximo device.
    """

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
