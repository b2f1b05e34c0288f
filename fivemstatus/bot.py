"""
Cliente de Discord y punto de entrada del proceso.
By Killerbite95
"""

import asyncio
import logging
import signal
import time
from typing import Optional

import aiohttp
import discord

from . import __version__
from .config import BotSettings, load_settings
from .exceptions import ConfigurationError
from .monitor import StatusMonitor
from .notifier import WebhookNotifier
from .overrides import MarkerFileStore
from .publisher import ChannelPublisher, PresencePublisher
from .query_handlers import AdminPanelUptimeHandler, CfxQueryHandler, QueryService

logger = logging.getLogger("fivemstatus")


class FiveMStatusBot(discord.Client):
    """Bot que publica el estado de un servidor FiveM en un canal. By Killerbite95"""

    def __init__(self, settings: BotSettings) -> None:
        super().__init__(intents=discord.Intents.default(), status=discord.Status.idle)
        self.settings = settings
        self.started_at = time.monotonic()
        self.session: Optional[aiohttp.ClientSession] = None
        self.notifier: Optional[WebhookNotifier] = None
        self.monitor: Optional[StatusMonitor] = None
        self._shutting_down = False

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at

    async def setup_hook(self) -> None:
        """Crea los servicios y arranca el bucle de monitoreo."""
        self.session = aiohttp.ClientSession()
        settings = self.settings

        uptime_handler = None
        if settings.admin_panel_host:
            uptime_handler = AdminPanelUptimeHandler(
                self.session, settings.admin_panel_host, settings.admin_panel_port
            )
        query_service = QueryService(
            CfxQueryHandler(self.session, settings.cfx_server_id),
            uptime_handler=uptime_handler
        )
        self.notifier = WebhookNotifier(
            self.session,
            settings.webhook_url,
            server_name=settings.server_name,
            timezone=settings.timezone
        )
        self.monitor = StatusMonitor(
            client=self,
            settings=settings,
            query_service=query_service,
            marker_store=MarkerFileStore(settings.maintenance_file, settings.admin_only_file),
            notifier=self.notifier,
            publisher=ChannelPublisher(self, settings.channel_id),
            presence=PresencePublisher(self)
        )
        self.monitor.start()

    async def on_ready(self) -> None:
        self.started_at = time.monotonic()
        logger.info(f"Bot online como {self.user} (FiveMStatus v{__version__})")

    async def on_disconnect(self) -> None:
        logger.warning("Bot desconectado de Discord")
        if self.notifier is not None and not self._shutting_down:
            await self.notifier.notify_disconnect(self.uptime_seconds)

    async def on_error(self, event_method: str, *args, **kwargs) -> None:
        logger.exception(f"Error no controlado en el evento {event_method}")

    async def shutdown(self, reason: str) -> None:
        """
        Apagado ordenado: notificación final y cierre del cliente.

        Args:
            reason: 'manual' (SIGINT) o 'system' (SIGTERM)
        """
        if self._shutting_down:
            return
        self._shutting_down = True
        logger.info(f"Apagando ({reason})...")
        if self.notifier is not None:
            await self.notifier.notify_shutdown(reason, self.uptime_seconds)
        await self.close()

    async def close(self) -> None:
        self._shutting_down = True
        if self.monitor is not None:
            self.monitor.stop()
        await super().close()
        if self.session is not None and not self.session.closed:
            await self.session.close()


def _handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Registra excepciones asíncronas no recuperadas sin detener el proceso."""
    exc = context.get("exception")
    logger.error(f"Excepción asíncrona no controlada: {context.get('message')}", exc_info=exc)


def install_signal_handlers(bot: FiveMStatusBot, loop: asyncio.AbstractEventLoop) -> None:
    """SIGINT -> apagado manual, SIGTERM -> apagado del sistema."""
    shutdown_tasks = set()

    def _schedule(reason: str) -> None:
        task = loop.create_task(bot.shutdown(reason))
        shutdown_tasks.add(task)
        task.add_done_callback(shutdown_tasks.discard)

    for name, reason in (("SIGINT", "manual"), ("SIGTERM", "system")):
        sig = getattr(signal, name, None)
        if sig is None:
            continue
        try:
            loop.add_signal_handler(sig, _schedule, reason)
        except NotImplementedError:
            # Windows: sin add_signal_handler
            signal.signal(sig, lambda *_, r=reason: loop.call_soon_threadsafe(_schedule, r))


async def run_bot(settings: BotSettings) -> None:
    loop = asyncio.get_running_loop()
    loop.set_exception_handler(_handle_loop_exception)
    bot = FiveMStatusBot(settings)
    install_signal_handlers(bot, loop)
    async with bot:
        await bot.start(settings.bot_token)


def main() -> int:
    """
    Punto de entrada del proceso.

    Returns:
        Código de salida: 0 en apagado ordenado, 1 en error
    """
    discord.utils.setup_logging(level=logging.INFO)
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"❌ {e.message}")
        logger.critical("Requeridas: BOT_TOKEN, CHANNEL_ID, CFX_SERVER_ID")
        return 1
    logging.getLogger().setLevel(settings.log_level)

    try:
        asyncio.run(run_bot(settings))
    except KeyboardInterrupt:
        return 0
    except discord.LoginFailure as e:
        logger.critical(f"Token de Discord inválido: {e}")
        return 1
    except Exception:
        logger.exception("Excepción no controlada, terminando el proceso")
        return 1
    return 0
