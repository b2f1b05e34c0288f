"""
Overrides de estado mediante archivos marcador.

Dos archivos de texto alteran el estado publicado:
    - maintenance.txt: modo mantenimiento (prioridad máxima)
    - admin-only.txt: servidor restringido a admins

La existencia del archivo activa el modo; su contenido recortado es el motivo.
By Killerbite95
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .models import OverrideFlags, RawServerReading, ResolvedStatus

logger = logging.getLogger("fivemstatus.overrides")

DEFAULT_MAINTENANCE_REASON = "Server is under maintenance"
DEFAULT_ADMIN_REASON = "Server is temporarily restricted to admins"


class MarkerFileStore:
    """Lee los archivos marcador en cada llamada, sin caché."""

    def __init__(
        self,
        maintenance_path: Union[str, Path] = "maintenance.txt",
        admin_only_path: Union[str, Path] = "admin-only.txt"
    ):
        self.maintenance_path = Path(maintenance_path)
        self.admin_only_path = Path(admin_only_path)

    def _read_marker(self, path: Path) -> Optional[str]:
        """
        Lee un marcador.

        Returns:
            Contenido recortado si existe, None si no existe o falla la lectura
        """
        try:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error leyendo el archivo marcador {path}: {e}")
            return None

    def read_override_flags(self) -> OverrideFlags:
        """
        Lee ambos marcadores. Si existe mantenimiento, admin-only no se consulta.
        """
        maintenance = self._read_marker(self.maintenance_path)
        if maintenance is not None:
            return OverrideFlags(maintenance=maintenance)
        return OverrideFlags(admin_only=self._read_marker(self.admin_only_path))


def resolve_status(reading: RawServerReading, flags: OverrideFlags) -> ResolvedStatus:
    """
    Aplica los overrides sobre la lectura cruda. El primero que coincide gana.

    Args:
        reading: Lectura de la API
        flags: Estado de los marcadores

    Returns:
        ResolvedStatus del ciclo
    """
    if flags.maintenance is not None:
        logger.info("[Maintenance Mode] Marcador de mantenimiento activo.")
        return ResolvedStatus(
            online=False,
            players=reading.players,
            max_players=reading.max_players,
            uptime_seconds=reading.uptime_seconds,
            maintenance=True,
            maintenance_reason=flags.maintenance or DEFAULT_MAINTENANCE_REASON
        )

    if flags.admin_only is not None:
        if reading.reachable:
            logger.info(
                f"[Admin-Only Mode] Servidor online. Jugadores: "
                f"{reading.players}/{reading.max_players}"
            )
        else:
            logger.info("[Admin-Only Mode] Servidor offline/inaccesible.")
        return ResolvedStatus(
            online=reading.reachable,
            players=reading.players,
            max_players=reading.max_players,
            uptime_seconds=reading.uptime_seconds,
            admin_only=True,
            admin_reason=flags.admin_only or DEFAULT_ADMIN_REASON
        )

    if reading.reachable:
        logger.info(f"[Public Mode] Servidor online. Jugadores: {reading.players}/{reading.max_players}")
    else:
        logger.info("[Public Mode] Servidor offline.")
    return ResolvedStatus(
        online=reading.reachable,
        players=reading.players,
        max_players=reading.max_players,
        uptime_seconds=reading.uptime_seconds
    )
