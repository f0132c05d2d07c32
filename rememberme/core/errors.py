# rememberme/core/errors.py


class RememberMeError(Exception):
    """Base de todos los errores del paquete."""


class ConfigurationError(RememberMeError):
    """Falta un colaborador o la configuración no es válida. Falla antes de operar."""


class StorageError(RememberMeError):
    """Fallo de lectura/escritura en el almacén. Se propaga sin reintentos."""


class SecretGenerationError(RememberMeError):
    """No hay fuente aleatoria segura disponible: se rechaza la emisión."""
