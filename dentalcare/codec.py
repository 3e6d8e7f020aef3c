"""
JSON encoding of the documents kept in local storage.

Three independent entries are persisted: the session user, the patient list
and the incident list. Decoding never raises: a document that is not valid
JSON, or does not match its schema, decodes to None and the caller treats
the entry as absent.
"""
# dentalcare/codec.py

import json

from pydantic import TypeAdapter, ValidationError

from dentalcare.logging_config import get_logger
from dentalcare.models import Incident, Patient, User

logger = get_logger(__name__)

SESSION_KEY = "dental-user"
PATIENTS_KEY = "dental-patients"
INCIDENTS_KEY = "dental-incidents"

_user_adapter = TypeAdapter(User)
_patients_adapter = TypeAdapter(list[Patient])
_incidents_adapter = TypeAdapter(list[Incident])


def encode_user(user: User) -> str:
    return json.dumps(user.to_json_dict())


def encode_patients(patients) -> str:
    return json.dumps([p.to_json_dict() for p in patients])


def encode_incidents(incidents) -> str:
    return json.dumps([i.to_json_dict() for i in incidents])


def _decode(adapter, raw, key):
    if raw is None:
        return None
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning("document_corrupt", key=key, errors=e.error_count())
        return None


def decode_user(raw):
    """Returns the stored User, or None if absent or corrupt."""
    return _decode(_user_adapter, raw, SESSION_KEY)


def decode_patients(raw):
    """Returns the stored patient list, or None if absent or corrupt."""
    return _decode(_patients_adapter, raw, PATIENTS_KEY)


def decode_incidents(raw):
    """Returns the stored incident list, or None if absent or corrupt."""
    return _decode(_incidents_adapter, raw, INCIDENTS_KEY)
