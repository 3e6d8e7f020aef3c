"""
Runtime settings for the DentalCare application.

Values are plain module constants so that tests can override them with
`monkeypatch.setattr`. Each one can be set through an environment variable.
"""
# dentalcare/config.py

import os

# Encrypted file holding the local key/value store.
DATA_FILE = os.environ.get("DENTALCARE_DATA_FILE", "dental_records.json")

# Fernet key used to encrypt DATA_FILE. Keep it out of version control.
KEY_FILE = os.environ.get("DENTALCARE_KEY_FILE", "secret.key")

LOG_LEVEL = os.environ.get("DENTALCARE_LOG_LEVEL", "INFO")
JSON_LOGS = os.environ.get("DENTALCARE_JSON_LOGS", "").lower() in ("1", "true", "yes")
