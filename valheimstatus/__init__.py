"""
ValheimStatus - Cog para Red Discord Bot
Muestra en Discord el estado de un servidor de Valheim publicado por Huginn.

By Killerbite95

Estructura del paquete:
    - valheimstatus.py: Cog principal con comandos y listeners
    - huginn.py: Cliente HTTP del endpoint de estado
    - formatter.py: Composición del mensaje de estado
    - schedule.py: Evaluación de expresiones cron
    - triggers.py: Clasificación de eventos y acciones
    - models.py: Dataclasses del documento de estado y del mensaje
    - exceptions.py: Excepciones personalizadas
"""

from redbot.core.bot import Red

from .valheimstatus import ValheimStatus

__all__ = ["ValheimStatus", "setup"]
__version__ = "1.0.0"
__author__ = "Killerbite95"


async def setup(bot: Red) -> None:
    """
    Función de setup requerida por Red-DiscordBot.
    
    Args:
        bot: Instancia del bot de Red
    """
    cog = ValheimStatus(bot)
    await bot.add_cog(cog)
