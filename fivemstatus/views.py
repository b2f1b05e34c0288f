"""
Views para FiveMStatus - Botón de conexión del panel de estado.
By Killerbite95
"""

from typing import Optional

import discord
from discord import ui


class ConnectView(ui.View):
    """
    View con un botón de enlace para unirse al servidor.

    Los botones de enlace no generan interacciones, así que la view
    no necesita callbacks ni registro persistente.
    """

    def __init__(self, connect_url: str, label: str = "🚀 CONNECT SERVER"):
        super().__init__(timeout=None)
        self.connect_url = connect_url
        self.add_item(ui.Button(style=discord.ButtonStyle.link, label=label, url=connect_url))


def create_connect_view(connect_url: Optional[str]) -> Optional[ConnectView]:
    """Crea la view de conexión, o None si no hay URL configurada."""
    if not connect_url:
        return None
    return ConnectView(connect_url)
