"""
ValheimStatus - Cog para Red Discord Bot
Consulta el estado de un servidor de Valheim a través de Huginn y lo muestra en Discord.
By Killerbite95

Versión: 1.0.0
Compatible con: Red-DiscordBot 3.5.22+
"""

import logging
import os
from typing import Optional, Dict, Any, Mapping, Tuple

import aiohttp
import discord
from redbot.core import commands, Config
from redbot.core.bot import Red
from redbot.core.i18n import Translator, cog_i18n

from . import formatter
from .exceptions import ConfigurationError
from .huginn import HuginnClient, DEFAULT_READ_TIMEOUT, create_session
from .triggers import Action, classify_command, classify_mention, dispatch

# Configuración de logging
logger = logging.getLogger("red.valheimstatus")

# Internacionalización
_ = Translator("ValheimStatus", __file__)

HUGINN_SERVICE = "huginn"
HUGINN_URL_ENV = "HUGINN_URL"
MIN_READ_TIMEOUT = 1.0
MAX_READ_TIMEOUT = 30.0


@cog_i18n(_)
class ValheimStatus(commands.Cog):
    """Muestra el estado del servidor de Valheim. By Killerbite95"""

    __author__ = "Killerbite95"
    __version__ = "1.0.0"

    def __init__(self, bot: Red) -> None:
        self.bot: Red = bot
        self.config: Config = Config.get_conf(
            self,
            identifier=8412950377,
            force_registration=True
        )

        default_global: Dict[str, Any] = {
            "read_timeout": DEFAULT_READ_TIMEOUT
        }
        self.config.register_global(**default_global)

        self._session: Optional[aiohttp.ClientSession] = None
        self._client: Optional[HuginnClient] = None
        self._url_source: Optional[str] = None

    async def cog_load(self) -> None:
        """Se ejecuta cuando el cog se carga. Sin URL de Huginn el cog no arranca."""
        self._session = create_session()
        try:
            await self._build_client()
        except ConfigurationError as e:
            logger.error(f"Fatal: {e}")
            await self._session.close()
            self._session = None
            raise

    async def cog_unload(self) -> None:
        """Limpieza al descargar el cog."""
        self._client = None
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def red_delete_data_for_user(self, **kwargs) -> None:
        """No se almacenan datos de usuarios."""
        pass

    # ==================== Utilidades ====================

    async def _resolve_base_url(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Busca la URL de Huginn.

        Orden: token compartido `huginn` (`[p]set api huginn url,<url>`)
        y después la variable de entorno HUGINN_URL.

        Returns:
            Tupla (url, origen) o (None, None) si no está configurada
        """
        tokens = await self.bot.get_shared_api_tokens(HUGINN_SERVICE)
        url = tokens.get("url")
        if url:
            return url, "shared api token"

        url = os.environ.get(HUGINN_URL_ENV)
        if url:
            return url, f"env {HUGINN_URL_ENV}"

        return None, None

    async def _build_client(self) -> None:
        """Crea el cliente de Huginn con la configuración actual."""
        url, source = await self._resolve_base_url()
        if not url:
            raise ConfigurationError(
                HUGINN_URL_ENV,
                f"usa `[p]set api {HUGINN_SERVICE} url,<url>` o define la variable de entorno"
            )

        read_timeout = await self.config.read_timeout()
        self._client = HuginnClient(url, self._session, read_timeout=read_timeout)
        self._url_source = source
        logger.info(f"Loaded {HUGINN_URL_ENV}={self._client.base_url} ({source})")

    async def _status_message(self) -> str:
        """Consulta Huginn y compone el mensaje a enviar."""
        if self._client is None:
            return formatter.not_available_message().to_markdown()
        result = await self._client.fetch_status()
        return formatter.render(result).to_markdown()

    async def _content_for(self, action: Action) -> str:
        if action.render_status:
            return await self._status_message()
        return action.reply

    # ==================== Listeners ====================

    @commands.Cog.listener()
    async def on_message_without_command(self, message: discord.Message) -> None:
        """Responde a las menciones del bot."""
        if message.author.bot:
            return

        if self.bot.user is None or self.bot.user not in message.mentions:
            return

        if message.guild is not None and await self.bot.cog_disabled_in_guild(self, message.guild):
            return

        if not await self.bot.allowed_by_whitelist_blacklist(message.author):
            return

        content = discord.utils.remove_markdown(message.clean_content)
        action = dispatch(classify_mention(content))

        try:
            if action.render_status:
                async with message.channel.typing():
                    reply = await self._content_for(action)
            else:
                reply = await self._content_for(action)
            await message.reply(reply)
        except discord.HTTPException as e:
            logger.error(f"No se pudo responder en el canal {message.channel.id}: {e!r}")

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Responde a comandos de aplicación que el bot no conoce."""
        if interaction.type is not discord.InteractionType.application_command:
            return

        data = interaction.data or {}
        name = data.get("name", "")
        command_type = discord.AppCommandType(data.get("type", 1))
        tree = self.bot.tree
        if (
            tree.get_command(name, guild=interaction.guild, type=command_type) is not None
            or tree.get_command(name, type=command_type) is not None
        ):
            return

        action = dispatch(classify_command(name))
        if action.render_status or interaction.response.is_done():
            return

        logger.debug(f"Comando de aplicación desconocido: {name}")
        try:
            await interaction.response.send_message(action.reply, ephemeral=action.ephemeral)
        except (discord.HTTPException, discord.InteractionResponded) as e:
            logger.error(f"No se pudo responder al comando {name}: {e!r}")

    @commands.Cog.listener()
    async def on_red_api_tokens_update(self, service_name: str, api_tokens: Mapping[str, str]) -> None:
        """Reconstruye el cliente si cambia la URL de Huginn."""
        if service_name != HUGINN_SERVICE or self._session is None:
            return
        try:
            await self._build_client()
        except ConfigurationError as e:
            logger.error(f"{e}")
            self._client = None

    # ==================== Comandos ====================

    @commands.hybrid_command(name="valheim-status")
    async def valheim_status(self, ctx: commands.Context) -> None:
        """Gets the status of the valheim server."""
        action = dispatch(classify_command(ctx.command.name))
        async with ctx.typing():
            content = await self._content_for(action)
        await ctx.send(content)

    @commands.group(name="valheimstatusset")
    @commands.is_owner()
    async def valheimstatusset(self, ctx: commands.Context) -> None:
        """ValheimStatus settings."""

    @valheimstatusset.command(name="timeout")
    async def set_timeout(self, ctx: commands.Context, seconds: float) -> None:
        """
        Sets the total timeout for status requests.

        The connection timeout is always 1 second.

        Example: `[p]valheimstatusset timeout 5`
        """
        if not MIN_READ_TIMEOUT <= seconds <= MAX_READ_TIMEOUT:
            await ctx.send(
                _("❌ El timeout debe estar entre {min} y {max} segundos.").format(
                    min=MIN_READ_TIMEOUT, max=MAX_READ_TIMEOUT
                )
            )
            return

        await self.config.read_timeout.set(seconds)
        if self._session is not None and self._client is not None:
            self._client = HuginnClient(self._client.base_url, self._session, read_timeout=seconds)
        await ctx.send(_("✅ Timeout establecido en **{}** segundos.").format(seconds))

    @valheimstatusset.command(name="show")
    async def show_settings(self, ctx: commands.Context) -> None:
        """Shows the current settings."""
        read_timeout = await self.config.read_timeout()
        if self._client is None:
            url = _("Not configured")
        else:
            url = f"{self._client.status_url} ({self._url_source})"

        await ctx.send(
            _("**URL:** {url}\n**Timeout:** {timeout}s").format(url=url, timeout=read_timeout)
        )

    @valheimstatusset.command(name="sync")
    @commands.guild_only()
    async def sync_commands(self, ctx: commands.Context) -> None:
        """
        Registers the slash commands in this server.

        Enable `valheim-status` first with `[p]slash enable valheim-status`.
        """
        self.bot.tree.copy_global_to(guild=ctx.guild)
        try:
            synced = await self.bot.tree.sync(guild=ctx.guild)
        except discord.HTTPException as e:
            logger.error(f"Error sincronizando comandos en {ctx.guild.name}: {e!r}")
            await ctx.send(_("❌ No se pudieron sincronizar los comandos."))
            return

        logger.info(f"{len(synced)} comandos sincronizados en {ctx.guild.name}")
        await ctx.send(_("✅ {} comandos sincronizados.").format(len(synced)))
