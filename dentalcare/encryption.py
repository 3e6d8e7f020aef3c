"""
Encryption of the DentalCare data file.

The local store is written to disk as a single Fernet token. This module
creates the Fernet key on first use and loads it on later runs.

Security Note: the key file must never be committed. Anyone holding it can
read every patient record in the data file.
"""
# dentalcare/encryption.py

from pathlib import Path

from cryptography.fernet import Fernet

from dentalcare import config
from dentalcare.logging_config import get_logger

logger = get_logger(__name__)


def write_key(path) -> bytes:
    """Generates a new Fernet key and saves it to `path`."""
    key = Fernet.generate_key()
    Path(path).write_bytes(key)
    return key


def load_or_create_key(path=None) -> bytes:
    """Loads the Fernet key, generating it if the key file does not exist yet.

    Args:
        path (str, optional): Location of the key file. Defaults to `config.KEY_FILE`.

    Returns:
        bytes: The encryption key.
    """
    path = Path(path or config.KEY_FILE)
    try:
        return path.read_bytes().strip()
    except FileNotFoundError:
        logger.warning("encryption_key_missing", key_file=str(path))
        return write_key(path)


def build_encryptor(path=None) -> Fernet:
    """Returns a Fernet instance keyed from the key file."""
    return Fernet(load_or_create_key(path))
