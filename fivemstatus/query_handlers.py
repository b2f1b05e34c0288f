"""
Query Handlers para FiveMStatus.
Consulta la API de Cfx.re y, opcionalmente, el panel de administración.
By Killerbite95
"""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp

from .exceptions import QueryConnectionError, QueryError, QueryTimeoutError
from .models import RawServerReading

logger = logging.getLogger("fivemstatus.query")

CFX_API_URL = "https://servers-frontend.fivem.net/api/servers/single/{server_id}"
USER_AGENT = "Mozilla/5.0 (compatible; FiveMStatus/1.0; +https://github.com/killerbite95)"
DEFAULT_TIMEOUT = 10.0


def lenient_int(value: Any) -> int:
    """
    Convierte un valor de la API a entero no negativo.

    Acepta int, float y strings numéricos; cualquier otra cosa es 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return max(int(value), 0)
    if isinstance(value, str):
        try:
            return lenient_int(float(value.strip()))
        except ValueError:
            return 0
    return 0


def parse_cfx_payload(payload: Any, url: str = CFX_API_URL) -> RawServerReading:
    """
    Parsea la respuesta de la API de Cfx.re.

    Args:
        payload: JSON decodificado de la respuesta
        url: URL consultada (solo para el mensaje de error)

    Returns:
        RawServerReading con reachable=True

    Raises:
        QueryError: Si el payload no contiene el objeto Data
    """
    data = payload.get("Data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise QueryError(url, f"Respuesta malformada de {url}: falta el objeto 'Data'")

    server_vars = data.get("vars")
    if not isinstance(server_vars, dict):
        server_vars = {}

    return RawServerReading(
        reachable=True,
        players=lenient_int(data.get("clients")),
        max_players=lenient_int(data.get("sv_maxclients")),
        uptime_seconds=lenient_int(server_vars.get("uptime"))
    )


class QueryHandler(ABC):
    """Clase base abstracta para handlers de query."""

    def __init__(self, session: aiohttp.ClientSession, timeout: float = DEFAULT_TIMEOUT):
        self.session = session
        self.timeout = timeout

    @property
    @abstractmethod
    def url(self) -> str:
        """URL que consulta este handler."""
        pass

    @abstractmethod
    async def query(self) -> RawServerReading:
        """
        Realiza la query.

        Raises:
            QueryError: En cualquier fallo de red, timeout o payload malformado
        """
        pass

    async def _get_json(self) -> Any:
        """GET con timeout acotado; traduce errores de aiohttp a QueryError."""
        url = self.url
        try:
            async with self.session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": USER_AGENT}
            ) as resp:
                if resp.status != 200:
                    raise QueryError(url, f"HTTP {resp.status} al consultar {url}")
                return await resp.json(content_type=None)
        except asyncio.TimeoutError:
            raise QueryTimeoutError(url, self.timeout)
        except aiohttp.ContentTypeError as e:
            raise QueryError(url, f"Respuesta no JSON de {url}: {e}")
        except ValueError as e:
            raise QueryError(url, f"JSON inválido de {url}: {e}")
        except aiohttp.ClientError as e:
            raise QueryConnectionError(url, str(e))


class CfxQueryHandler(QueryHandler):
    """Handler para la API pública de servidores de Cfx.re."""

    def __init__(self, session: aiohttp.ClientSession, server_id: str, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(session, timeout)
        self.server_id = server_id

    @property
    def url(self) -> str:
        return CFX_API_URL.format(server_id=self.server_id)

    async def query(self) -> RawServerReading:
        payload = await self._get_json()
        reading = parse_cfx_payload(payload, self.url)
        logger.info(
            f"[CFX API] {reading.players}/{reading.max_players} jugadores, "
            f"uptime {reading.uptime_seconds}s"
        )
        return reading


class AdminPanelUptimeHandler(QueryHandler):
    """Fuente alternativa de uptime: /info.json del servidor o panel."""

    def __init__(self, session: aiohttp.ClientSession, host: str, port: int, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(session, timeout)
        self.host = host
        self.port = port

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/info.json"

    async def query_uptime(self) -> int:
        payload = await self._get_json()
        server_vars = payload.get("vars") if isinstance(payload, dict) else None
        if not isinstance(server_vars, dict):
            raise QueryError(self.url, f"Respuesta malformada de {self.url}: falta 'vars'")
        return lenient_int(server_vars.get("uptime"))

    async def query(self) -> RawServerReading:
        uptime = await self.query_uptime()
        return RawServerReading(reachable=True, uptime_seconds=uptime)


class QueryService:
    """
    Servicio principal de consulta.
    fetch_reading() es total: nunca propaga errores al llamador.
    """

    def __init__(
        self,
        handler: QueryHandler,
        uptime_handler: Optional[AdminPanelUptimeHandler] = None
    ):
        self.handler = handler
        self.uptime_handler = uptime_handler
        self.stats: Dict[str, int] = {"total": 0, "failed": 0}

    async def fetch_reading(self) -> RawServerReading:
        """
        Obtiene la lectura del servidor.

        Returns:
            RawServerReading; en caso de error, lectura offline con contadores a cero
        """
        self.stats["total"] += 1
        try:
            reading = await self.handler.query()
        except QueryError as e:
            self.stats["failed"] += 1
            logger.warning(f"[Fetch Error] {e.message}")
            return RawServerReading.unreachable()
        except Exception as e:
            self.stats["failed"] += 1
            logger.error(f"Error inesperado consultando {self.handler.url}: {e!r}")
            return RawServerReading.unreachable()

        if self.uptime_handler is not None:
            reading = await self._apply_panel_uptime(reading)
        return reading

    async def _apply_panel_uptime(self, reading: RawServerReading) -> RawServerReading:
        """Sustituye el uptime por el del panel si responde con un valor > 0."""
        try:
            uptime = await self.uptime_handler.query_uptime()
        except QueryError as e:
            logger.debug(f"Uptime del panel no disponible: {e.message}")
            return reading
        except Exception as e:
            logger.error(f"Error inesperado consultando el panel: {e!r}")
            return reading

        if uptime <= 0:
            return reading
        return RawServerReading(
            reachable=reading.reachable,
            players=reading.players,
            max_players=reading.max_players,
            uptime_seconds=uptime
        )
