"""
Detección de cambios de estado y envío de notificaciones por webhook.
By Killerbite95
"""

import datetime
import logging
from typing import List, Optional, Tuple

import aiohttp
import discord
import pytz

from .models import NotificationEvent, NotificationKind, ResolvedStatus
from .renderer import (
    MAX_DESCRIPTION_LENGTH,
    MAX_FIELD_LENGTH,
    truncate_value,
    format_players,
    format_uptime,
)

logger = logging.getLogger("fivemstatus.notifier")

STARTUP_COLOR = 0x00BFFF
OFFLINE_COLOR = 0xFF0000
WARNING_COLOR = 0xFFA500


def diff_status(
    previous: Optional[ResolvedStatus],
    current: ResolvedStatus
) -> List[NotificationEvent]:
    """
    Compara el estado anterior con el actual y genera los eventos de transición.

    Las reglas son independientes: un mismo ciclo puede emitir una transición
    online/offline y la entrada en mantenimiento.

    Args:
        previous: Estado del ciclo anterior (None en el primer ciclo)
        current: Estado del ciclo actual

    Returns:
        Lista ordenada de eventos (vacía si no hay cambios)
    """
    if previous is None:
        return []

    events: List[NotificationEvent] = []

    if previous.online != current.online:
        kind = NotificationKind.BECAME_ONLINE if current.online else NotificationKind.BECAME_OFFLINE
        events.append(NotificationEvent(
            kind=kind,
            players=current.players,
            max_players=current.max_players,
            uptime_seconds=current.uptime_seconds
        ))

    if not previous.maintenance and current.maintenance:
        events.append(NotificationEvent(
            kind=NotificationKind.ENTERED_MAINTENANCE,
            players=current.players,
            max_players=current.max_players,
            uptime_seconds=current.uptime_seconds,
            reason=current.maintenance_reason
        ))

    if not previous.admin_only and current.admin_only:
        events.append(NotificationEvent(
            kind=NotificationKind.ENTERED_ADMIN_ONLY,
            players=current.players,
            max_players=current.max_players,
            uptime_seconds=current.uptime_seconds,
            reason=current.admin_reason
        ))

    return events


def event_fields(event: NotificationEvent) -> List[Tuple[str, str]]:
    """Campos (nombre, valor) que acompañan a cada tipo de evento."""
    players = format_players(event.players, event.max_players)
    if event.kind == NotificationKind.BECAME_ONLINE:
        return [("👥 Players", players), ("⏰ Uptime", format_uptime(event.uptime_seconds))]
    if event.kind == NotificationKind.ENTERED_ADMIN_ONLY:
        return [("👥 Players", players)]
    return []


class WebhookNotifier:
    """
    Sumidero de notificaciones vía webhook de Discord.

    Es best-effort: cualquier fallo se registra y se ignora.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        url: Optional[str],
        server_name: str = "FiveM Server",
        timezone: str = "UTC"
    ):
        self.server_name = server_name
        self.timezone = timezone
        self.webhook: Optional[discord.Webhook] = None
        if url:
            try:
                self.webhook = discord.Webhook.from_url(url, session=session)
            except ValueError:
                logger.warning("WEBHOOK_URL no es una URL de webhook de Discord válida; notificaciones desactivadas.")

    @property
    def enabled(self) -> bool:
        return self.webhook is not None

    async def send(
        self,
        title: str,
        description: str,
        color: int,
        fields: Optional[List[Tuple[str, str]]] = None
    ) -> bool:
        """
        Envía un embed al webhook.

        Returns:
            True si se envió, False si está desactivado o falló
        """
        if self.webhook is None:
            return False

        embed = discord.Embed(
            title=title,
            description=truncate_value(description, MAX_DESCRIPTION_LENGTH),
            color=discord.Color(color),
            timestamp=datetime.datetime.now(datetime.timezone.utc)
        )
        for name, value in fields or []:
            embed.add_field(name=name, value=truncate_value(value, MAX_FIELD_LENGTH), inline=True)
        embed.set_footer(text=f"{self.server_name} Bot")

        try:
            await self.webhook.send(embed=embed)
        except (discord.HTTPException, aiohttp.ClientError) as e:
            logger.error(f"[Webhook Error] No se pudo enviar la notificación '{title}': {e}")
            return False
        except Exception as e:
            logger.error(f"[Webhook Error] Error inesperado enviando '{title}': {e!r}")
            return False

        logger.info(f"[Webhook] Notificación enviada: {title}")
        return True

    async def notify(self, event: NotificationEvent) -> bool:
        """Envía la notificación correspondiente a un evento de transición."""
        description = event.kind.description.format(
            server_name=self.server_name,
            reason=event.reason or ""
        )
        return await self.send(
            event.kind.title,
            description,
            event.kind.color.value,
            event_fields(event)
        )

    async def notify_startup(self, status: ResolvedStatus) -> bool:
        """Aviso de arranque con el estado del primer ciclo."""
        if not status.online and not status.maintenance:
            return await self.send(
                "🚀 Bot Online - Server Offline",
                "The bot started but the server is currently offline.",
                OFFLINE_COLOR
            )

        if status.maintenance:
            mode = "🔧 Maintenance"
        elif status.admin_only:
            mode = "🛡️ Admin Only"
        else:
            mode = "🟢 Public Online"
        return await self.send(
            "🚀 Bot Online - Server Status",
            f"The bot started successfully!\n\n**Server Status:** {mode}",
            STARTUP_COLOR,
            [
                ("👥 Players", format_players(status.players, status.max_players)),
                ("⏰ Uptime", format_uptime(status.uptime_seconds))
            ]
        )

    async def notify_disconnect(self, bot_uptime_seconds: float) -> bool:
        return await self.send(
            "⚠️ Bot Disconnected from Discord",
            "The bot lost its connection to Discord.",
            WARNING_COLOR,
            [("⏰ Bot Uptime", format_uptime(bot_uptime_seconds))]
        )

    async def notify_shutdown(self, reason: str, bot_uptime_seconds: float) -> bool:
        """
        Aviso de apagado.

        Args:
            reason: 'manual' (SIGINT) o 'system' (SIGTERM)
            bot_uptime_seconds: Tiempo que llevaba el bot en marcha
        """
        try:
            tz = pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Zona horaria '{self.timezone}' inválida, usando UTC.")
            tz = pytz.UTC
        shutdown_time = datetime.datetime.now(tz).strftime("%Y-%m-%d %H:%M:%S %Z")

        if reason == "manual":
            title, description = "🛑 Bot Offline (Manual Shutdown)", "The bot was stopped manually."
        else:
            title, description = "🛑 Bot Offline (System Shutdown)", "The bot was stopped by the system."
        return await self.send(
            title,
            description,
            OFFLINE_COLOR,
            [
                ("⏰ Bot Ran For", format_uptime(bot_uptime_seconds)),
                ("📅 Shutdown Time", shutdown_time)
            ]
        )
