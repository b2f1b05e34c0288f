"""
Bucle de monitoreo de FiveMStatus.

Cada ciclo: consulta -> overrides -> notificaciones -> render -> publicación.
By Killerbite95
"""

import logging
from typing import Optional

import discord
from discord.ext import tasks

from .config import BotSettings
from .models import NotificationKind, ResolvedStatus
from .notifier import WebhookNotifier, diff_status
from .overrides import MarkerFileStore, resolve_status
from .publisher import ChannelPublisher, PresencePublisher
from .query_handlers import QueryService
from .renderer import build_embed, render_panel
from .views import create_connect_view

logger = logging.getLogger("fivemstatus.monitor")

TRANSITION_LOGS = {
    NotificationKind.BECAME_ONLINE: "✅ ¡Servidor de nuevo online!",
    NotificationKind.BECAME_OFFLINE: "🔴 Servidor offline detectado",
    NotificationKind.ENTERED_MAINTENANCE: "🔧 Servidor en modo mantenimiento",
    NotificationKind.ENTERED_ADMIN_ONLY: "🛡️ Servidor en modo Admin Only"
}


class StatusMonitor:
    """
    Ejecuta los ciclos de actualización en intervalos fijos.

    Los ciclos nunca se solapan: si un tick llega con un ciclo en curso,
    se ignora. El estado anterior es una única ranura que se sobrescribe
    en cada ciclo.
    """

    def __init__(
        self,
        client: discord.Client,
        settings: BotSettings,
        query_service: QueryService,
        marker_store: MarkerFileStore,
        notifier: WebhookNotifier,
        publisher: ChannelPublisher,
        presence: PresencePublisher
    ):
        self.client = client
        self.settings = settings
        self.query_service = query_service
        self.marker_store = marker_store
        self.notifier = notifier
        self.publisher = publisher
        self.presence = presence

        self.previous_status: Optional[ResolvedStatus] = None
        self.cycles_completed = 0
        self._cycle_running = False

    @property
    def cycle_running(self) -> bool:
        return self._cycle_running

    # ==================== Ciclo ====================

    async def run_cycle(self) -> bool:
        """
        Ejecuta un ciclo completo. Los errores se registran y no se propagan.

        Returns:
            False si ya había un ciclo en curso (tick ignorado), True en otro caso
        """
        if self._cycle_running:
            logger.debug("Ciclo anterior aún en curso, tick ignorado")
            return False

        self._cycle_running = True
        try:
            await self._cycle()
        except Exception as e:
            logger.exception(f"Error en la actualización principal: {e!r}")
        finally:
            self._cycle_running = False
        return True

    async def _cycle(self) -> None:
        reading = await self.query_service.fetch_reading()
        flags = self.marker_store.read_override_flags()
        status = resolve_status(reading, flags)

        previous = self.previous_status
        events = diff_status(previous, status)
        self.previous_status = status

        for event in events:
            logger.info(TRANSITION_LOGS[event.kind])
            await self.notifier.notify(event)

        if previous is None:
            await self.notifier.notify_startup(status)

        panel = render_panel(status, self.settings)
        embed = build_embed(panel, self.settings)
        view = create_connect_view(self.settings.connect_url)

        await self.publisher.publish_panel(embed, view)
        await self.presence.apply(panel)
        self.cycles_completed += 1

    # ==================== Tarea ====================

    @tasks.loop(seconds=60)
    async def poll_loop(self) -> None:
        """Tarea principal; la primera iteración corre al arrancar."""
        await self.run_cycle()

    @poll_loop.before_loop
    async def before_poll_loop(self) -> None:
        """Espera a que el bot esté listo antes de iniciar el monitoreo."""
        await self.client.wait_until_ready()

    def start(self) -> None:
        if self.poll_loop.is_running():
            return
        self.poll_loop.change_interval(seconds=self.settings.refresh_seconds)
        self.poll_loop.start()
        logger.info(f"Monitoreo iniciado cada {self.settings.refresh_seconds}s")

    def stop(self) -> None:
        self.poll_loop.cancel()
