"""
Renderizado del panel de estado.

render_panel() es una función pura: mismo ResolvedStatus, mismo panel.
build_embed() convierte el panel en un discord.Embed.
By Killerbite95
"""

import datetime
from typing import List, Optional

import discord

from .config import BotSettings
from .models import DisplayPanel, DisplayState, PanelField, ResolvedStatus

MAX_TITLE_LENGTH = 256
MAX_FIELD_LENGTH = 1024
MAX_DESCRIPTION_LENGTH = 4096
BOX_FENCE_LENGTH = len("```\n\n```")


def truncate_value(text: str, limit: int = MAX_FIELD_LENGTH) -> str:
    """Trunca un valor para cumplir con los límites de Discord."""
    if len(text) > limit:
        text = text[:max(limit - 3, 0)] + "..."
    return text


def format_uptime(seconds: float) -> str:
    """Formatea segundos como 'Hh Mm' (división entera, sin redondeo)."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    return f"{hours}h {remainder // 60}m"


def format_players(players: int, max_players: int) -> str:
    return f"{players}/{max_players}"


def box(text: str) -> str:
    """Envuelve el texto en un bloque de código sin pasar de MAX_FIELD_LENGTH."""
    text = truncate_value(text, MAX_FIELD_LENGTH - BOX_FENCE_LENGTH)
    return f"```\n{text}\n```"


def display_state(status: ResolvedStatus) -> DisplayState:
    """Prioridad: mantenimiento > admin-only > online > offline."""
    if status.maintenance:
        return DisplayState.MAINTENANCE
    if status.admin_only:
        return DisplayState.ADMIN_ONLY if status.online else DisplayState.ADMIN_ONLY_OFFLINE
    if status.online:
        return DisplayState.ONLINE
    return DisplayState.OFFLINE


def presence_text(status: ResolvedStatus, state: Optional[DisplayState] = None) -> str:
    """Texto corto para la actividad del bot."""
    state = state or display_state(status)
    players = format_players(status.players, status.max_players)
    if state == DisplayState.MAINTENANCE:
        return "🔧 Server Maintenance"
    if state == DisplayState.ADMIN_ONLY:
        return f"🛡️ Admin Only ({players})"
    if state == DisplayState.ADMIN_ONLY_OFFLINE:
        return "🛡️ Admin Only (Offline)"
    if state == DisplayState.ONLINE:
        return f"{players} Players Online"
    return "🔴 Server Offline"


def render_panel(status: ResolvedStatus, settings: Optional[BotSettings] = None) -> DisplayPanel:
    """
    Genera el panel a partir del estado resuelto.

    Args:
        status: Estado del ciclo
        settings: Configuración (direcciones de conexión, canal de reinicios)

    Returns:
        DisplayPanel con título, campos ordenados y presencia
    """
    state = display_state(status)
    fields: List[PanelField] = [
        PanelField("📡 Server Status", box(state.status_line), inline=True),
        PanelField(
            "👥 Players",
            box(format_players(status.players, status.max_players)),
            inline=True
        )
    ]

    if status.maintenance:
        fields.append(PanelField("🔧 Maintenance Info", box(status.maintenance_reason)))
    if status.admin_only:
        fields.append(PanelField("🛡️ Admin Only Info", box(status.admin_reason)))

    if settings is not None:
        for label, address in settings.connect_addresses:
            fields.append(PanelField(f"🎮 F8 CONNECT ({label})", box(f"connect {address}")))
        if settings.restart_info_channel_id:
            fields.append(PanelField(
                "⏳ Restart Info",
                f"Check restart announcements in <#{settings.restart_info_channel_id}>"
            ))

    uptime = format_uptime(status.uptime_seconds) if status.online else format_uptime(0)
    fields.append(PanelField("⏰ Server Uptime", box(uptime)))

    return DisplayPanel(
        state=state,
        title=state.title,
        presence=presence_text(status, state),
        fields=fields
    )


def _truncate_title(title: str, suffix: str) -> str:
    """Trunca el título del embed para cumplir con el límite de Discord."""
    allowed = MAX_TITLE_LENGTH - len(suffix)
    if len(title) > allowed:
        title = title[:max(allowed - 3, 0)] + "..."
    return title + suffix


def build_embed(
    panel: DisplayPanel,
    settings: BotSettings,
    now: Optional[datetime.datetime] = None
) -> discord.Embed:
    """Convierte el panel en el embed publicado en el canal."""
    embed = discord.Embed(
        title=_truncate_title(f"✨ **{settings.server_name}**", " — Server Status ✨"),
        description=f"**{panel.title}**",
        color=panel.state.color
    )
    if settings.logo_url:
        embed.set_thumbnail(url=settings.logo_url)
    if settings.background_url:
        embed.set_image(url=settings.background_url)

    for panel_field in panel.fields:
        embed.add_field(name=panel_field.name, value=panel_field.value, inline=panel_field.inline)

    minutes = settings.refresh_minutes
    embed.set_footer(
        text=f"{settings.server_name} • Updated every {minutes} minute{'s' if minutes != 1 else ''}"
    )
    embed.timestamp = now or datetime.datetime.now(datetime.timezone.utc)
    return embed
