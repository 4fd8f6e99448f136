"""
Evaluación de expresiones cron para ValheimStatus.
Calcula cuánto falta para la próxima ejecución de una tarea y lo formatea.
By Killerbite95
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from croniter import croniter, CroniterBadDateError, CroniterError
from dateutil import tz

from .exceptions import InvalidScheduleError

logger = logging.getLogger("red.valheimstatus.schedule")

# Dialecto Unix: minuto, hora, día del mes, mes, día de la semana
CRON_FIELDS = 5


def local_now() -> datetime:
    """Hora actual en la zona local del sistema, con sus reglas de horario de verano."""
    return datetime.now(tz.tzlocal())


def _aware(now: datetime) -> datetime:
    """Una fecha naive se interpreta como hora local."""
    if now.tzinfo is None:
        return now.replace(tzinfo=tz.tzlocal())
    return now


def parse_schedule(expression: str, now: Optional[datetime] = None) -> croniter:
    """
    Valida y compila una expresión cron de cinco campos.

    Args:
        expression: Expresión cron en dialecto Unix (sin segundos)
        now: Instante base para la iteración (por defecto, ahora)

    Returns:
        Iterador croniter posicionado en `now`

    Raises:
        InvalidScheduleError: Si la expresión no es válida
    """
    if not isinstance(expression, str) or not expression.strip():
        raise InvalidScheduleError(str(expression), "expresión vacía")

    fields = expression.split()
    if len(fields) != CRON_FIELDS:
        raise InvalidScheduleError(
            expression,
            f"se esperaban {CRON_FIELDS} campos, recibidos {len(fields)}"
        )

    base = _aware(now) if now is not None else local_now()
    try:
        return croniter(" ".join(fields), base)
    except (CroniterError, ValueError, KeyError) as e:
        raise InvalidScheduleError(expression, str(e)) from e


def next_execution(expression: str, now: datetime) -> Optional[datetime]:
    """Primer instante estrictamente posterior a `now` que cumple la expresión."""
    now = _aware(now)
    itr = parse_schedule(expression, now)
    try:
        return itr.get_next(datetime)
    except CroniterBadDateError as e:
        logger.debug(f"Sin próxima ejecución para '{expression}': {e}")
        return None


def time_to_next(expression: str, now: datetime) -> Optional[timedelta]:
    """
    Tiempo restante hasta la próxima ejecución.

    Returns:
        timedelta positivo, o None si no se puede calcular una próxima ejecución

    Raises:
        InvalidScheduleError: Si la expresión no es válida
    """
    now = _aware(now)
    upcoming = next_execution(expression, now)
    if upcoming is None:
        return None
    # Misma tzinfo en ambos extremos: restar en UTC para contar el cambio de hora
    return upcoming.astimezone(timezone.utc) - now.astimezone(timezone.utc)


def human_readable(duration: timedelta) -> str:
    """
    Formatea una duración como `1h 5m 3s`.

    Se trunca a segundos y sólo se muestran las unidades distintas de cero;
    las horas no se agrupan en días. Una duración nula se muestra como `0s`.
    """
    total_seconds = duration // timedelta(seconds=1)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = [
        f"{value}{suffix}"
        for value, suffix in ((hours, "h"), (minutes, "m"), (seconds, "s"))
        if value
    ]
    return " ".join(parts) or "0s"
