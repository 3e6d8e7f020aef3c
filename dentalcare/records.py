"""
This module holds the patient and incident collections of the DentalCare store.

`RecordStore` is responsible for:
- Loading both collections from local storage, falling back to the seed data.
- Creating records with store-assigned ids and creation timestamps.
- Merging partial updates into existing records.
- Deleting records, cascading patient deletion to the patient's incidents.
- Writing the full affected collection back to storage after every change.

Updates and deletes that name an unknown id are silent no-ops.
"""
# dentalcare/records.py

from dentalcare import codec
from dentalcare.errors import StorageError
from dentalcare.ids import IdGenerator
from dentalcare.logging_config import get_logger
from dentalcare.models import (
    Incident,
    IncidentCreate,
    IncidentUpdate,
    Patient,
    PatientCreate,
    PatientUpdate,
    utcnow,
)
from dentalcare.seed import initial_incidents, initial_patients

logger = get_logger(__name__)


def _coerce(model, data):
    return data if isinstance(data, model) else model.model_validate(data)


class RecordStore:
    """Owns the Patient and Incident collections."""

    def __init__(self, storage, seed_patients=None, seed_incidents=None):
        """Loads both collections from `storage`.

        Args:
            storage (LocalStorage): Durable key/value store.
            seed_patients (callable, optional): Returns the default patient list.
            seed_incidents (callable, optional): Returns the default incident list.
        """
        self._storage = storage
        self._patient_ids = IdGenerator("p")
        self._incident_ids = IdGenerator("i")
        self._patients = self._load(
            codec.PATIENTS_KEY, codec.decode_patients, codec.encode_patients,
            seed_patients or initial_patients,
        )
        self._incidents = self._load(
            codec.INCIDENTS_KEY, codec.decode_incidents, codec.encode_incidents,
            seed_incidents or initial_incidents,
        )

    def _load(self, key, decode, encode, seed):
        raw = self._storage.get_item(key)
        records = decode(raw)
        if records is not None:
            return records
        if raw is not None:
            logger.warning("collection_reset_to_seed", key=key)
        records = seed()
        try:
            self._storage.set_item(key, encode(records))
        except StorageError:
            logger.exception("seed_write_failed", key=key)
        return records

    @property
    def patients(self) -> list:
        return list(self._patients)

    @property
    def incidents(self) -> list:
        return list(self._incidents)

    def _save_patients(self):
        self._storage.set_item(codec.PATIENTS_KEY, codec.encode_patients(self._patients))

    def _save_incidents(self):
        self._storage.set_item(codec.INCIDENTS_KEY, codec.encode_incidents(self._incidents))

    def _save_new(self, save, record):
        # The record is kept and returned even when it could not be written.
        try:
            save()
        except StorageError:
            logger.exception("record_write_failed", record_id=record.id)

    # Patients

    def get_patient(self, patient_id):
        return next((p for p in self._patients if p.id == patient_id), None)

    def add_patient(self, data) -> Patient:
        """Registers a new patient.

        Args:
            data (PatientCreate or dict): Patient fields without id or creation time.

        Returns:
            Patient: The stored record. Returned even if the write to
                storage fails; the in-memory collection still holds it.
        """
        data = _coerce(PatientCreate, data)
        patient = Patient(
            **data.model_dump(exclude={"id", "created_at"}),
            id=self._patient_ids({p.id for p in self._patients}),
            created_at=utcnow(),
        )
        self._patients = self._patients + [patient]
        self._save_new(self._save_patients, patient)
        logger.info("patient_added", patient_id=patient.id)
        return patient

    def update_patient(self, patient_id, changes) -> None:
        """Merges `changes` into the patient with `patient_id`.

        Fields absent from `changes` keep their values. Unknown ids are ignored.

        Args:
            patient_id (str): Target patient.
            changes (PatientUpdate or dict): The fields to overwrite.
        """
        changes = _coerce(PatientUpdate, changes).changes()
        for index, patient in enumerate(self._patients):
            if patient.id == patient_id:
                updated = Patient.model_validate({**patient.model_dump(), **changes})
                self._patients = self._patients[:index] + [updated] + self._patients[index + 1:]
                self._save_patients()
                logger.info("patient_updated", patient_id=patient_id, fields=sorted(changes))
                return
        logger.info("patient_update_skipped", patient_id=patient_id, reason="not_found")

    def delete_patient(self, patient_id) -> None:
        """Deletes a patient together with every incident that references it."""
        remaining = [p for p in self._patients if p.id != patient_id]
        if len(remaining) == len(self._patients):
            logger.info("patient_delete_skipped", patient_id=patient_id, reason="not_found")
            return
        kept_incidents = [i for i in self._incidents if i.patient_id != patient_id]
        removed = len(self._incidents) - len(kept_incidents)
        self._patients = remaining
        self._incidents = kept_incidents
        self._save_patients()
        self._save_incidents()
        logger.info("patient_deleted", patient_id=patient_id, incidents_removed=removed)

    # Incidents

    def get_incident(self, incident_id):
        return next((i for i in self._incidents if i.id == incident_id), None)

    def add_incident(self, data) -> Incident:
        """Books a new incident.

        The referenced patient is not required to exist.

        Args:
            data (IncidentCreate or dict): Incident fields without id or creation time.

        Returns:
            Incident: The stored record. Returned even if the write to
                storage fails.
        """
        data = _coerce(IncidentCreate, data)
        incident = Incident(
            **data.model_dump(exclude={"id", "created_at"}),
            id=self._incident_ids({i.id for i in self._incidents}),
            created_at=utcnow(),
        )
        self._incidents = self._incidents + [incident]
        self._save_new(self._save_incidents, incident)
        logger.info("incident_added", incident_id=incident.id, patient_id=incident.patient_id)
        return incident

    def update_incident(self, incident_id, changes) -> None:
        """Merges `changes` into the incident with `incident_id`. Unknown ids are ignored."""
        changes = _coerce(IncidentUpdate, changes).changes()
        for index, incident in enumerate(self._incidents):
            if incident.id == incident_id:
                updated = Incident.model_validate({**incident.model_dump(), **changes})
                self._incidents = self._incidents[:index] + [updated] + self._incidents[index + 1:]
                self._save_incidents()
                logger.info("incident_updated", incident_id=incident_id, fields=sorted(changes))
                return
        logger.info("incident_update_skipped", incident_id=incident_id, reason="not_found")

    def delete_incident(self, incident_id) -> None:
        remaining = [i for i in self._incidents if i.id != incident_id]
        if len(remaining) == len(self._incidents):
            logger.info("incident_delete_skipped", incident_id=incident_id, reason="not_found")
            return
        self._incidents = remaining
        self._save_incidents()
        logger.info("incident_deleted", incident_id=incident_id)

    def get_patient_incidents(self, patient_id) -> list:
        """Returns the incidents of one patient in collection order."""
        return [i for i in self._incidents if i.patient_id == patient_id]
