"""
Cliente HTTP para Huginn, el servicio que expone el estado del servidor de Valheim.
By Killerbite95
"""

import asyncio
import logging

import aiohttp

from .exceptions import StatusDecodeError
from .models import FetchResult, StatusReport

logger = logging.getLogger("red.valheimstatus.huginn")

STATUS_PATH = "/status"
CONNECT_TIMEOUT = 1.0
DEFAULT_READ_TIMEOUT = 5.0


class HuginnClient:
    """
    Consulta el endpoint `/status` de Huginn.
    Una petición por llamada, sin caché ni reintentos.
    """

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession,
        read_timeout: float = DEFAULT_READ_TIMEOUT
    ):
        if read_timeout <= 0:
            raise ValueError("read_timeout debe ser positivo")
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._timeout = aiohttp.ClientTimeout(
            total=max(read_timeout, CONNECT_TIMEOUT),
            connect=CONNECT_TIMEOUT
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def status_url(self) -> str:
        return f"{self._base_url}{STATUS_PATH}"

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return self._timeout

    async def fetch_status(self) -> FetchResult:
        """
        Obtiene y decodifica el estado del servidor.

        Cualquier fallo de red o de decodificación se convierte en un resultado
        vacío. La cancelación (asyncio.CancelledError) no se captura.

        Returns:
            FetchResult con el StatusReport, o vacío si no se pudo obtener
        """
        url = self.status_url
        try:
            async with self._session.get(url, timeout=self._timeout) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
            report = StatusReport.from_dict(data)
        except asyncio.TimeoutError:
            logger.error(f"Timeout consultando {url}")
            return FetchResult.empty(f"Timeout consultando {url}")
        except aiohttp.ClientResponseError as e:
            logger.error(f"Respuesta HTTP {e.status} de {url}: {e.message}")
            return FetchResult.empty(f"HTTP {e.status}")
        except aiohttp.ClientError as e:
            logger.error(f"No se pudo obtener el estado de {url}: {e!r}")
            return FetchResult.empty(str(e) or type(e).__name__)
        except StatusDecodeError as e:
            logger.error(f"Documento de estado inválido desde {url}: {e}")
            return FetchResult.empty(str(e))
        except ValueError as e:
            # JSON mal formado
            logger.error(f"Respuesta no decodificable desde {url}: {e}")
            return FetchResult.empty(str(e))

        logger.debug(f"Estado obtenido de {url}: {report.name} online={report.online}")
        return FetchResult.ok(report)


def create_session() -> aiohttp.ClientSession:
    """Crea la sesión HTTP compartida por el cog."""
    return aiohttp.ClientSession(headers={"Accept": "application/json"})
