"""
Composición del mensaje de estado del servidor de Valheim.
By Killerbite95
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from .exceptions import InvalidScheduleError
from .models import FetchResult, FormattedMessage, Line, ModInfo, Segment, StatusReport
from .schedule import human_readable, local_now, time_to_next

logger = logging.getLogger("red.valheimstatus.formatter")

AUTO_UPDATE_JOB = "AUTO_UPDATE"
AUTO_BACKUP_JOB = "AUTO_BACKUP"

# (nombre de la tarea, prefijo de la línea)
JOB_LINES: Tuple[Tuple[str, str], ...] = (
    (AUTO_UPDATE_JOB, "Time to next server update check: "),
    (AUTO_BACKUP_JOB, "Time to next server backup: "),
)


def not_available_message() -> FormattedMessage:
    """Mensaje fijo cuando no se pudo contactar con el servidor."""
    return FormattedMessage(lines=(
        (Segment("Could not connect to server. The server is probably "), Segment("OFFLINE", bold=True)),
    ))


def _status_line(report: StatusReport) -> Line:
    return (
        Segment(report.name, bold=True),
        Segment(" is "),
        Segment("ONLINE" if report.online else "OFFLINE", bold=True),
    )


def _version_line(report: StatusReport) -> Line:
    return (Segment("Version: "), Segment(report.version, bold=True))


def _mods_line(mods: Tuple[ModInfo, ...]) -> Line:
    segments: List[Segment] = [Segment("Installed mods: ")]
    last_index = len(mods) - 1
    for i, mod in enumerate(mods):
        # Sin separador antes del primero ni antes del último
        if i != 0 and i != last_index:
            segments.append(Segment(", "))
        segments.append(Segment(mod.display_name, bold=True))
    return tuple(segments)


def _players_line(report: StatusReport) -> Line:
    return (
        Segment("There are currently "),
        Segment(str(report.players), bold=True),
        Segment(" active players"),
    )


def _job_line(report: StatusReport, job_name: str, prefix: str, now: datetime) -> Optional[Line]:
    job = report.find_job(job_name)
    if job is None:
        return None

    try:
        remaining = time_to_next(job.schedule, now)
    except InvalidScheduleError as e:
        logger.warning(f"Tarea {job_name} ignorada en {report.name}: {e}")
        return None

    if remaining is None:
        return None
    return (Segment(prefix), Segment(human_readable(remaining)))


def render_report(report: StatusReport, now: Optional[datetime] = None) -> FormattedMessage:
    """
    Compone el informe de estado.

    Args:
        report: Documento de estado decodificado
        now: Instante de referencia para las tareas programadas (por defecto, ahora)

    Returns:
        FormattedMessage con las líneas en orden
    """
    if now is None:
        now = local_now()

    lines: List[Line] = [_status_line(report), _version_line(report)]

    mods = report.installed_mods
    if mods:
        lines.append(_mods_line(mods))

    lines.append(_players_line(report))
    lines.append(())

    lines.extend(
        line for line in (
            _job_line(report, job_name, prefix, now) for job_name, prefix in JOB_LINES
        )
        if line is not None
    )

    return FormattedMessage(lines=tuple(lines))


def render(result: FetchResult, now: Optional[datetime] = None) -> FormattedMessage:
    """Informe de estado, o el mensaje fijo si la consulta falló."""
    if not result.success:
        return not_available_message()
    return render_report(result.report, now)
