"""
Publicación del panel en Discord: mensaje del canal y presencia del bot.
By Killerbite95
"""

import logging
from typing import List, Optional, Tuple

import discord

from .exceptions import ChannelNotFoundError, FiveMStatusError, InsufficientPermissionsError
from .models import DisplayPanel

logger = logging.getLogger("fivemstatus.publisher")

REQUIRED_PERMISSIONS = ("send_messages", "embed_links", "read_message_history")


class ChannelPublisher:
    """
    Mantiene como máximo un mensaje de estado vivo en el canal.

    El mensaje propio es "el último mensaje del canal si lo escribió el bot";
    si no existe o es de otro autor, se publica uno nuevo.
    """

    def __init__(self, client: discord.Client, channel_id: int):
        self.client = client
        self.channel_id = channel_id

    async def get_channel(self) -> discord.abc.Messageable:
        """
        Obtiene el canal desde caché o desde la API.

        Raises:
            ChannelNotFoundError: Si el canal no existe o no es accesible
        """
        channel = self.client.get_channel(self.channel_id)
        if channel is None:
            try:
                channel = await self.client.fetch_channel(self.channel_id)
            except (discord.NotFound, discord.Forbidden):
                raise ChannelNotFoundError(self.channel_id)
        if not hasattr(channel, "history"):
            raise ChannelNotFoundError(self.channel_id)
        return channel

    def check_permissions(self, channel: discord.abc.GuildChannel) -> Tuple[bool, List[str]]:
        """
        Verifica que el bot tenga permisos necesarios en el canal.

        Returns:
            Tupla (tiene_permisos, lista_permisos_faltantes)
        """
        guild = getattr(channel, "guild", None)
        if guild is None:
            return True, []
        permissions = channel.permissions_for(guild.me)
        missing = [perm for perm in REQUIRED_PERMISSIONS if not getattr(permissions, perm)]
        return len(missing) == 0, missing

    async def find_owned_message(self, channel: Optional[discord.abc.Messageable] = None) -> Optional[discord.Message]:
        """Retorna el último mensaje del canal si es del bot, None en otro caso."""
        channel = channel or await self.get_channel()
        async for message in channel.history(limit=1):
            if self.client.user is not None and message.author.id == self.client.user.id:
                return message
            logger.debug(f"Último mensaje de {channel} es de otro autor ({message.author.id})")
            return None
        return None

    async def publish(
        self,
        handle: Optional[discord.Message],
        embed: discord.Embed,
        view: Optional[discord.ui.View] = None,
        channel: Optional[discord.abc.Messageable] = None
    ) -> discord.Message:
        """
        Edita el mensaje existente o envía uno nuevo.

        Args:
            handle: Mensaje propio a editar (None para enviar uno nuevo)
            embed: Embed a publicar
            view: View opcional con el botón de conexión

        Returns:
            El mensaje publicado
        """
        if handle is not None:
            try:
                return await handle.edit(embed=embed, view=view)
            except discord.NotFound:
                logger.info(f"Mensaje {handle.id} no encontrado, creando uno nuevo")

        channel = channel or await self.get_channel()
        message = await channel.send(embed=embed, view=view)
        logger.info(f"Nuevo mensaje de estado {message.id} en canal {self.channel_id}")
        return message

    async def publish_panel(self, embed: discord.Embed, view: Optional[discord.ui.View] = None) -> Optional[discord.Message]:
        """
        Publica el panel. Los errores se registran y no se propagan.

        Returns:
            El mensaje publicado o None si falló
        """
        try:
            channel = await self.get_channel()
            has_perms, missing = self.check_permissions(channel)
            if not has_perms:
                raise InsufficientPermissionsError(self.channel_id, missing)
            handle = await self.find_owned_message(channel)
            return await self.publish(handle, embed, view, channel=channel)
        except FiveMStatusError as e:
            logger.error(e.message)
        except discord.Forbidden:
            logger.error(f"Sin permisos para publicar en el canal {self.channel_id}")
        except discord.HTTPException as e:
            logger.error(f"Error HTTP al publicar el estado: {e}")
        return None


class PresencePublisher:
    """Actualiza la presencia (actividad + indicador) del bot."""

    def __init__(self, client: discord.Client):
        self.client = client

    async def apply(self, panel: DisplayPanel) -> bool:
        activity = discord.Activity(type=discord.ActivityType.watching, name=panel.presence)
        try:
            await self.client.change_presence(
                status=discord.Status(panel.presence_status),
                activity=activity
            )
        except (discord.HTTPException, ConnectionError) as e:
            logger.error(f"Error actualizando la presencia del bot: {e}")
            return False
        return True
