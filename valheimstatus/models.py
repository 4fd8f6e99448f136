"""
Modelos de datos para ValheimStatus.
Incluye el documento de estado decodificado, el resultado de una consulta
y los segmentos con los que se construye el mensaje.
By Killerbite95
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

from redbot.core.utils.chat_formatting import bold

from .exceptions import StatusDecodeError

logger = logging.getLogger("red.valheimstatus.models")


def _require(data: Dict[str, Any], key: str) -> Any:
    """Obtiene un campo obligatorio del documento."""
    if data.get(key) is None:
        raise StatusDecodeError(key, "campo obligatorio ausente")
    return data[key]


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise StatusDecodeError(key, f"se esperaba texto, recibido {type(value).__name__}")
    return value


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise StatusDecodeError(key, f"se esperaba booleano, recibido {type(value).__name__}")
    return value


def _as_int(value: Any, key: str) -> int:
    # bool es subclase de int, pero no es un número válido aquí
    if isinstance(value, bool) or not isinstance(value, int):
        raise StatusDecodeError(key, f"se esperaba entero, recibido {type(value).__name__}")
    return value


def _as_list(value: Any, key: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise StatusDecodeError(key, f"se esperaba lista, recibido {type(value).__name__}")
    return value


def _as_dict(value: Any, key: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise StatusDecodeError(key, f"se esperaba objeto, recibido {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ModInfo:
    """Un mod de BepInEx instalado en el servidor."""
    name: str
    location: str = ""

    @property
    def display_name(self) -> str:
        """Nombre sin la primera aparición de la extensión `.dll`."""
        return self.name.replace(".dll", "", 1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModInfo":
        data = _as_dict(data, "bepinex.mods")
        location = data.get("location")
        return cls(
            name=_as_str(_require(data, "name"), "bepinex.mods.name"),
            location=_as_str(location, "bepinex.mods.location") if location is not None else ""
        )


@dataclass(frozen=True)
class ModSubsystem:
    """Estado del cargador de mods BepInEx."""
    enabled: bool = False
    mods: Tuple[ModInfo, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ModSubsystem":
        if data is None:
            return cls()
        data = _as_dict(data, "bepinex")
        enabled = data.get("enabled")
        return cls(
            enabled=_as_bool(enabled, "bepinex.enabled") if enabled is not None else False,
            mods=tuple(ModInfo.from_dict(m) for m in _as_list(data.get("mods"), "bepinex.mods"))
        )


@dataclass(frozen=True)
class ScheduledJob:
    """Tarea programada del servidor (actualización o backup automático)."""
    name: str
    enabled: bool
    schedule: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduledJob":
        """
        Crea una instancia desde el JSON decodificado.

        Sólo el nombre es obligatorio. Un `enabled` ausente o inválido desactiva
        la tarea; un `schedule` ausente o inválido queda vacío y la línea de la
        tarea se omite al formatear.

        Raises:
            StatusDecodeError: Si la entrada no es un objeto o no tiene nombre
        """
        data = _as_dict(data, "jobs")
        name = _as_str(_require(data, "name"), "jobs.name")

        enabled = data.get("enabled")
        if not isinstance(enabled, bool):
            logger.debug(f"Tarea {name} sin `enabled` válido: {enabled!r}")
            enabled = False

        schedule = data.get("schedule")
        if not isinstance(schedule, str):
            logger.debug(f"Tarea {name} sin `schedule` válido: {schedule!r}")
            schedule = ""

        return cls(name=name, enabled=enabled, schedule=schedule)


def _decode_jobs(value: Any) -> Tuple[ScheduledJob, ...]:
    """Decodifica las tareas descartando las entradas que no se pueden leer."""
    jobs: List[ScheduledJob] = []
    for entry in _as_list(value, "jobs"):
        try:
            jobs.append(ScheduledJob.from_dict(entry))
        except StatusDecodeError as e:
            logger.warning(f"Tarea ignorada: {e}")
    return tuple(jobs)


@dataclass(frozen=True)
class StatusReport:
    """Documento de estado tal y como lo devuelve el endpoint `/status`."""
    name: str
    version: str
    players: int
    online: bool
    max_players: int = 0
    map: str = ""
    bepinex: ModSubsystem = field(default_factory=ModSubsystem)
    jobs: Tuple[ScheduledJob, ...] = ()

    @property
    def installed_mods(self) -> Tuple[ModInfo, ...]:
        """Mods a mostrar; vacío si BepInEx está desactivado."""
        if self.bepinex.enabled:
            return self.bepinex.mods
        return ()

    def find_job(self, name: str) -> Optional[ScheduledJob]:
        """Primera tarea activa con ese nombre, en el orden del documento."""
        return next(
            (job for job in self.jobs if job.enabled and job.name == name),
            None
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatusReport":
        """
        Crea una instancia desde el JSON decodificado.

        Raises:
            StatusDecodeError: Si falta un campo obligatorio o su tipo no es válido
        """
        data = _as_dict(data, "status")

        players = _as_int(_require(data, "players"), "players")
        if players < 0:
            raise StatusDecodeError("players", "no puede ser negativo")

        max_players = data.get("max_players")
        map_name = data.get("map")

        return cls(
            name=_as_str(_require(data, "name"), "name"),
            version=_as_str(_require(data, "version"), "version"),
            players=players,
            online=_as_bool(_require(data, "online"), "online"),
            max_players=_as_int(max_players, "max_players") if max_players is not None else 0,
            map=_as_str(map_name, "map") if map_name is not None else "",
            bepinex=ModSubsystem.from_dict(data.get("bepinex")),
            jobs=_decode_jobs(data.get("jobs"))
        )


@dataclass(frozen=True)
class FetchResult:
    """Resultado de una consulta al endpoint de estado."""
    report: Optional[StatusReport] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.report is not None

    @classmethod
    def ok(cls, report: StatusReport) -> "FetchResult":
        return cls(report=report)

    @classmethod
    def empty(cls, error: Optional[str] = None) -> "FetchResult":
        return cls(error=error)


@dataclass(frozen=True)
class Segment:
    """Fragmento de texto, opcionalmente en negrita."""
    text: str
    bold: bool = False

    def to_markdown(self) -> str:
        if self.bold:
            return bold(self.text, escape_formatting=False)
        return self.text


Line = Tuple[Segment, ...]


@dataclass(frozen=True)
class FormattedMessage:
    """Mensaje ya compuesto, listo para serializar una sola vez."""
    lines: Tuple[Line, ...] = ()

    @property
    def plain_text(self) -> str:
        """Texto sin marcas de formato."""
        return "\n".join("".join(s.text for s in line) for line in self.lines)

    def to_markdown(self) -> str:
        """Serializa el mensaje con el formato de Discord."""
        return "\n".join("".join(s.to_markdown() for s in line) for line in self.lines)

    def __str__(self) -> str:
        return self.to_markdown()
