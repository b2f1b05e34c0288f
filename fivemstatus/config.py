"""
Configuración de FiveMStatus a partir de variables de entorno.
Opcionalmente se carga un archivo .env con python-dotenv.
By Killerbite95
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

import pytz
from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger("fivemstatus.config")

REQUIRED_KEYS = ("BOT_TOKEN", "CHANNEL_ID", "CFX_SERVER_ID")
MIN_REFRESH_SECONDS = 10


@dataclass
class BotSettings:
    """Configuración completa del bot."""
    bot_token: str
    channel_id: int
    cfx_server_id: str
    server_name: str = "FiveM Server"
    logo_url: Optional[str] = None
    background_url: Optional[str] = None
    webhook_url: Optional[str] = None
    connect_url: Optional[str] = None
    connect_addresses: List[Tuple[str, str]] = field(default_factory=list)
    restart_info_channel_id: Optional[int] = None
    admin_panel_host: Optional[str] = None
    admin_panel_port: int = 30120
    refresh_seconds: int = 60
    timezone: str = "UTC"
    maintenance_file: Path = Path("maintenance.txt")
    admin_only_file: Path = Path("admin-only.txt")
    log_level: str = "INFO"

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    @property
    def refresh_minutes(self) -> int:
        return max(self.refresh_seconds // 60, 1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotSettings":
        """
        Construye la configuración desde un mapping tipo entorno.

        Args:
            environ: Variables a usar (default: os.environ)

        Returns:
            BotSettings validado

        Raises:
            ConfigurationError: Si falta una clave requerida o un valor es inválido
        """
        env = os.environ if environ is None else environ

        def get(key: str) -> Optional[str]:
            value = env.get(key)
            if value is None:
                return None
            value = value.strip()
            return value or None

        missing = [key for key in REQUIRED_KEYS if not get(key)]
        if missing:
            raise ConfigurationError(
                ", ".join(missing),
                "variables de entorno requeridas no definidas"
            )

        cfx_server_id = get("CFX_SERVER_ID")
        refresh_seconds = _parse_int("REFRESH_SECONDS", get("REFRESH_SECONDS"), 60)
        if refresh_seconds < MIN_REFRESH_SECONDS:
            raise ConfigurationError(
                "REFRESH_SECONDS", f"debe ser al menos {MIN_REFRESH_SECONDS}"
            )

        timezone = get("TIMEZONE") or "UTC"
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ConfigurationError("TIMEZONE", f"zona horaria '{timezone}' no es válida")

        log_level = (get("LOG_LEVEL") or "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError("LOG_LEVEL", f"nivel '{log_level}' desconocido")

        return cls(
            bot_token=get("BOT_TOKEN"),
            channel_id=_parse_int("CHANNEL_ID", get("CHANNEL_ID")),
            cfx_server_id=cfx_server_id,
            server_name=get("SERVER_NAME") or "FiveM Server",
            logo_url=get("LOGO_URL"),
            background_url=get("BG_URL"),
            webhook_url=get("WEBHOOK_URL"),
            connect_url=get("CONNECT_URL") or f"https://cfx.re/join/{cfx_server_id}",
            connect_addresses=parse_connect_addresses(get("CONNECT_ADDRESSES")),
            restart_info_channel_id=_parse_int(
                "RESTART_INFO_CHANNEL_ID", get("RESTART_INFO_CHANNEL_ID"), None
            ),
            admin_panel_host=get("ADMIN_PANEL_HOST"),
            admin_panel_port=_parse_port(get("ADMIN_PANEL_PORT")),
            refresh_seconds=refresh_seconds,
            timezone=timezone,
            maintenance_file=Path(get("MAINTENANCE_FILE") or "maintenance.txt"),
            admin_only_file=Path(get("ADMIN_ONLY_FILE") or "admin-only.txt"),
            log_level=log_level
        )


_UNSET = object()


def _parse_int(key: str, raw: Optional[str], default=_UNSET) -> Optional[int]:
    """Convierte un valor a int o lanza ConfigurationError."""
    if raw is None:
        if default is _UNSET:
            raise ConfigurationError(key, "valor requerido")
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(key, f"'{raw}' no es un número entero")


def _parse_port(raw: Optional[str]) -> int:
    port = _parse_int("ADMIN_PANEL_PORT", raw, 30120)
    if not 1 <= port <= 65535:
        raise ConfigurationError(
            "ADMIN_PANEL_PORT", f"puerto inválido: {port}. Debe estar entre 1 y 65535."
        )
    return port


def parse_connect_addresses(raw: Optional[str]) -> List[Tuple[str, str]]:
    """
    Parsea 'LABEL=direccion,LABEL2=direccion2'.

    Las entradas sin etiqueta reciben 'MAIN' (la primera) o 'ALT n'.
    """
    if not raw:
        return []
    addresses: List[Tuple[str, str]] = []
    for index, chunk in enumerate(part.strip() for part in raw.split(",")):
        if not chunk:
            continue
        if "=" in chunk:
            label, address = (piece.strip() for piece in chunk.split("=", 1))
        else:
            label, address = "", chunk
        if not address:
            logger.warning(f"Entrada de CONNECT_ADDRESSES sin dirección ignorada: '{chunk}'")
            continue
        if not label:
            label = "MAIN" if index == 0 else f"ALT {index}"
        addresses.append((label.upper(), address))
    return addresses


def load_settings(env_file: Optional[str] = ".env") -> BotSettings:
    """
    Carga el archivo .env (si existe) y construye la configuración.
    Las variables ya presentes en el entorno tienen prioridad.
    """
    if env_file and Path(env_file).is_file():
        load_dotenv(env_file, override=False)
        logger.debug(f"Archivo de entorno cargado: {env_file}")
    return BotSettings.from_env()
