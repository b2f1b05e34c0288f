"""
Modelos de datos para FiveMStatus.
Incluye Enums, dataclasses y estructuras de datos.
By Killerbite95
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

import discord


@dataclass(frozen=True)
class RawServerReading:
    """Lectura cruda de la API de estado. Se recalcula en cada ciclo."""
    reachable: bool
    players: int = 0
    max_players: int = 0
    uptime_seconds: int = 0

    @classmethod
    def unreachable(cls) -> "RawServerReading":
        """Lectura de servidor caído: todos los contadores a cero."""
        return cls(reachable=False)


@dataclass(frozen=True)
class OverrideFlags:
    """
    Estado de los archivos marcador.

    None significa que el marcador no existe; un string (puede ser vacío)
    es el contenido ya recortado del archivo.
    """
    maintenance: Optional[str] = None
    admin_only: Optional[str] = None


@dataclass(frozen=True)
class ResolvedStatus:
    """Estado autoritativo de un ciclo tras aplicar los overrides."""
    online: bool
    players: int = 0
    max_players: int = 0
    uptime_seconds: int = 0
    maintenance: bool = False
    maintenance_reason: Optional[str] = None
    admin_only: bool = False
    admin_reason: Optional[str] = None

    @property
    def player_display(self) -> str:
        """Retorna string formateado de jugadores."""
        return f"{self.players}/{self.max_players}"


class NotificationKind(Enum):
    """Tipos de transición que generan una notificación."""
    BECAME_ONLINE = auto()
    BECAME_OFFLINE = auto()
    ENTERED_MAINTENANCE = auto()
    ENTERED_ADMIN_ONLY = auto()

    @property
    def title(self) -> str:
        """Retorna el título del embed de notificación."""
        titles = {
            NotificationKind.BECAME_ONLINE: "✅ Server Online",
            NotificationKind.BECAME_OFFLINE: "🔴 Server Offline",
            NotificationKind.ENTERED_MAINTENANCE: "🔧 Maintenance Mode",
            NotificationKind.ENTERED_ADMIN_ONLY: "🛡️ Admin Only Mode"
        }
        return titles[self]

    @property
    def description(self) -> str:
        """Plantilla de descripción; acepta {server_name} y {reason}."""
        descriptions = {
            NotificationKind.BECAME_ONLINE: "{server_name} is back online!",
            NotificationKind.BECAME_OFFLINE: "{server_name} is offline or unreachable.",
            NotificationKind.ENTERED_MAINTENANCE: (
                "The server entered maintenance mode.\n\n**Reason:** {reason}"
            ),
            NotificationKind.ENTERED_ADMIN_ONLY: (
                "The server entered Admin Only mode.\n\n**Reason:** {reason}"
            )
        }
        return descriptions[self]

    @property
    def color(self) -> discord.Color:
        """Retorna el color correspondiente a la transición."""
        colors = {
            NotificationKind.BECAME_ONLINE: discord.Color(0x00FF00),
            NotificationKind.BECAME_OFFLINE: discord.Color(0xFF0000),
            NotificationKind.ENTERED_MAINTENANCE: discord.Color(0xFFA500),
            NotificationKind.ENTERED_ADMIN_ONLY: discord.Color(0xFFFF00)
        }
        return colors[self]


@dataclass(frozen=True)
class NotificationEvent:
    """Evento emitido en una transición de estado. No se retiene."""
    kind: NotificationKind
    players: int = 0
    max_players: int = 0
    uptime_seconds: int = 0
    reason: Optional[str] = None


class DisplayState(Enum):
    """Estado visible del servidor, en orden de prioridad."""
    MAINTENANCE = auto()
    ADMIN_ONLY = auto()
    ADMIN_ONLY_OFFLINE = auto()
    ONLINE = auto()
    OFFLINE = auto()

    @property
    def title(self) -> str:
        """Retorna el título corto del estado."""
        titles = {
            DisplayState.MAINTENANCE: "🔴 Maintenance",
            DisplayState.ADMIN_ONLY: "🟡 Admin Only",
            DisplayState.ADMIN_ONLY_OFFLINE: "🟡 Admin Only (Offline)",
            DisplayState.ONLINE: "🟢 Online",
            DisplayState.OFFLINE: "🔴 Offline"
        }
        return titles[self]

    @property
    def status_line(self) -> str:
        """Retorna el texto del campo de estado del panel."""
        lines = {
            DisplayState.MAINTENANCE: "🔧 Maintenance Mode",
            DisplayState.ADMIN_ONLY: "🛡️ Online (Restricted)",
            DisplayState.ADMIN_ONLY_OFFLINE: "🛡️ Server Offline",
            DisplayState.ONLINE: "✅ Public Server",
            DisplayState.OFFLINE: "Offline"
        }
        return lines[self]

    @property
    def color(self) -> discord.Color:
        """Retorna el color correspondiente al estado."""
        colors = {
            DisplayState.MAINTENANCE: discord.Color.orange(),
            DisplayState.ADMIN_ONLY: discord.Color.gold(),
            DisplayState.ADMIN_ONLY_OFFLINE: discord.Color.gold(),
            DisplayState.ONLINE: discord.Color.green(),
            DisplayState.OFFLINE: discord.Color.red()
        }
        return colors.get(self, discord.Color.greyple())

    @property
    def presence_status(self) -> str:
        """Indicador de presencia de Discord (online/idle/dnd)."""
        if self == DisplayState.MAINTENANCE:
            return "dnd"
        if self in (DisplayState.ONLINE, DisplayState.ADMIN_ONLY):
            return "online"
        return "idle"


@dataclass(frozen=True)
class PanelField:
    """Un campo del panel de estado."""
    name: str
    value: str
    inline: bool = False


@dataclass
class DisplayPanel:
    """Panel renderizado a partir de un ResolvedStatus."""
    state: DisplayState
    title: str
    presence: str
    fields: List[PanelField] = field(default_factory=list)

    @property
    def presence_status(self) -> str:
        return self.state.presence_status

    def field_values(self) -> List[str]:
        """Valores de los campos, en orden."""
        return [f.value for f in self.fields]
