"""
FiveMStatus - Bot de estado para servidores FiveM
Publica el estado de un servidor en un canal de Discord y en la presencia del bot.

By Killerbite95

Estructura del paquete:
    - bot.py: Cliente de Discord, señales y punto de entrada
    - monitor.py: Bucle de monitoreo (un ciclo cada intervalo)
    - query_handlers.py: Consulta a la API de Cfx.re y al panel
    - overrides.py: Archivos marcador de mantenimiento / admin-only
    - notifier.py: Transiciones de estado y webhook de notificaciones
    - renderer.py: Panel de estado y presencia
    - publisher.py: Mensaje del canal y presencia en Discord
    - views.py: Botón de conexión
    - models.py: Dataclasses y Enums
    - config.py: Configuración desde variables de entorno
    - exceptions.py: Excepciones personalizadas
"""

__version__ = "1.0.0"
__author__ = "Killerbite95"

__all__ = ["__version__", "__author__"]
