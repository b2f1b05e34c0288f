"""
Excepciones personalizadas para FiveMStatus.
By Killerbite95
"""

from typing import List, Optional


class FiveMStatusError(Exception):
    """Excepción base para todos los errores de FiveMStatus."""

    def __init__(self, message: str = "Error en FiveMStatus"):
        self.message = message
        super().__init__(self.message)


class QueryError(FiveMStatusError):
    """Excepción base para errores al consultar la API de estado."""

    def __init__(self, url: str, message: Optional[str] = None):
        self.url = url
        self.message = message or f"Error al consultar {url}"
        super().__init__(self.message)


class QueryTimeoutError(QueryError):
    """Se lanza cuando una query excede el tiempo de espera."""

    def __init__(self, url: str, timeout: float = 10.0):
        self.timeout = timeout
        message = f"Timeout ({timeout}s) al consultar {url}"
        super().__init__(url, message)


class QueryConnectionError(QueryError):
    """Se lanza cuando no se puede establecer conexión con la API."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.reason = reason
        message = f"No se pudo conectar a {url}"
        if reason:
            message += f": {reason}"
        super().__init__(url, message)


class ChannelNotFoundError(FiveMStatusError):
    """Se lanza cuando el canal de estado (CHANNEL_ID) no existe o no es de texto."""

    def __init__(self, channel_id: int):
        self.channel_id = channel_id
        message = (
            f"El canal de estado {channel_id} (CHANNEL_ID) no existe, no es accesible "
            f"o no admite mensajes."
        )
        super().__init__(message)


class InsufficientPermissionsError(FiveMStatusError):
    """Se lanza cuando el bot no puede publicar el panel en el canal de estado."""

    def __init__(self, channel_id: int, missing_permissions: List[str]):
        self.channel_id = channel_id
        self.missing_permissions = missing_permissions
        perms_str = ", ".join(missing_permissions)
        message = (
            f"No se puede publicar el panel de estado en el canal {channel_id}. "
            f"Permisos de Discord faltantes: {perms_str}"
        )
        super().__init__(message)


class ConfigurationError(FiveMStatusError):
    """Se lanza cuando falta o es inválida una variable de entorno (o del .env)."""

    def __init__(self, key: str, reason: Optional[str] = None):
        self.key = key
        self.reason = reason
        message = f"Variable de entorno {key} inválida"
        if reason:
            message += f": {reason}"
        message += " (revisa el entorno o el archivo .env)"
        super().__init__(message)
