"""
Excepciones personalizadas para ValheimStatus.
By Killerbite95
"""

from typing import Optional


class ValheimStatusError(Exception):
    """Excepción base para todos los errores del cog ValheimStatus."""
    
    def __init__(self, message: str = "Error en ValheimStatus"):
        self.message = message
        super().__init__(self.message)


class StatusDecodeError(ValheimStatusError):
    """Se lanza cuando el documento de estado no tiene la forma esperada."""
    
    def __init__(self, field: str, reason: Optional[str] = None):
        self.field = field
        self.reason = reason
        message = f"Campo '{field}' inválido en el documento de estado"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidScheduleError(ValheimStatusError):
    """Se lanza cuando una expresión cron no se puede interpretar."""
    
    def __init__(self, expression: str, reason: Optional[str] = None):
        self.expression = expression
        self.reason = reason
        message = f"Expresión cron inválida '{expression}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigurationError(ValheimStatusError):
    """Se lanza cuando hay un error en la configuración del cog."""
    
    def __init__(self, key: str, reason: Optional[str] = None):
        self.key = key
        self.reason = reason
        message = f"Error de configuración en '{key}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
