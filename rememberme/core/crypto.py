# rememberme/core/crypto.py
from __future__ import annotations

import secrets
import string

from cryptography.hazmat.primitives import hashes

from rememberme.core.errors import ConfigurationError, SecretGenerationError

# 62 caracteres alfanuméricos -> 64 * log2(62) ≈ 380 bits con la longitud por defecto
ALPHANUMERIC = string.digits + string.ascii_lowercase + string.ascii_uppercase
DEFAULT_SECRET_LENGTH = 64
DEFAULT_HASH_ALGORITHM = "sha256"

_ALGORITHMS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha512_256": hashes.SHA512_256,
    "sha3_256": hashes.SHA3_256,
    "sha3_384": hashes.SHA3_384,
    "sha3_512": hashes.SHA3_512,
}


def _normalize_algorithm(name: str) -> str:
    """'SHA-256', 'sha3-256', 'sha512/256' -> 'sha256', 'sha3_256', 'sha512_256'."""
    key = (name or "").strip().lower().replace("/", "_")
    if key.startswith("sha3-"):
        return key.replace("-", "_")
    return key.replace("-", "")


def _hash_instance(algorithm: str) -> hashes.HashAlgorithm:
    key = _normalize_algorithm(algorithm)
    if key == "blake2b":
        return hashes.BLAKE2b(64)
    if key == "blake2s":
        return hashes.BLAKE2s(32)
    cls = _ALGORITHMS.get(key)
    if cls is None:
        raise ConfigurationError(f"unsupported hash algorithm: {algorithm!r}")
    return cls()


def supported_algorithms() -> list[str]:
    return sorted([*_ALGORITHMS, "blake2b", "blake2s"])


def check_algorithm(algorithm: str) -> str:
    """Valida el nombre y lo devuelve normalizado (lanza ConfigurationError si no existe)."""
    _hash_instance(algorithm)
    return _normalize_algorithm(algorithm)


def generate_secret(length: int = DEFAULT_SECRET_LENGTH, alphabet: str = ALPHANUMERIC) -> str:
    """
    Cadena aleatoria apta como credencial al portador.
    Sólo usa el CSPRNG del sistema; si no existe se rechaza la emisión (sin fallback).
    """
    if length < 1:
        raise ValueError("length must be a positive integer")
    if len(set(alphabet)) < 2:
        raise ValueError("alphabet must contain at least two distinct characters")
    try:
        return "".join(secrets.choice(alphabet) for _ in range(length))
    except NotImplementedError as e:
        # os.urandom sin fuente segura en esta plataforma
        raise SecretGenerationError("no secure random source available") from e


def hash_secret(secret: str, algorithm: str = DEFAULT_HASH_ALGORITHM) -> str:
    """Digest hex (minúsculas) del secreto. Determinista y de un solo sentido."""
    h = hashes.Hash(_hash_instance(algorithm))
    h.update(secret.encode("utf-8"))
    return h.finalize().hex()
