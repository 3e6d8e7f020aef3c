"""
This module provides the single entry point the DentalCare UI talks to.

`DentalCareService` composes the session store, the record store and the file
ingestor behind one object. It is responsible for:
- Exposing the current user and the patient and incident collections.
- Forwarding every mutation to the owning store, which writes it through to
  local storage before returning.
- Notifying subscribers after each committed change so views can re-render.
- Keeping storage failures away from the UI: write errors are logged and the
  in-memory state stays authoritative.

The service is built explicitly by the application root and passed to the
views; nothing here is a module-level singleton.
"""
# dentalcare/service.py

from dentalcare import config
from dentalcare.encryption import build_encryptor
from dentalcare.errors import StorageError
from dentalcare.files import FileIngestor
from dentalcare.logging_config import get_logger
from dentalcare.models import Role
from dentalcare.records import RecordStore
from dentalcare.session import SessionStore
from dentalcare.storage import LocalStorage

logger = get_logger(__name__)


class DentalCareService:
    """Facade over the session, record and file stores."""

    def __init__(self, storage=None, identities=None, credentials=None,
                 seed_patients=None, seed_incidents=None):
        """Initializes the service, restoring or seeding all state.

        Args:
            storage (LocalStorage, optional): Durable store. Defaults to the
                encrypted file at `config.DATA_FILE`.
            identities (list[User], optional): Identity table for login.
            credentials (dict, optional): Email to password table for login.
            seed_patients (callable, optional): Default patients for an empty store.
            seed_incidents (callable, optional): Default incidents for an empty store.
        """
        self._storage = storage if storage is not None else self.default_storage()
        self._session = SessionStore(self._storage, identities, credentials)
        self._records = RecordStore(self._storage, seed_patients, seed_incidents)
        self._files = FileIngestor()
        self._subscribers = []

    @staticmethod
    def default_storage():
        """Opens the encrypted data file named in the configuration."""
        return LocalStorage(config.DATA_FILE, encryptor=build_encryptor(config.KEY_FILE))

    # Observers

    def subscribe(self, callback):
        """Registers `callback()` to run after every committed change.

        Streamlit reruns the whole script on each interaction, so the bundled
        GUI does not subscribe; this is the hook for embedders that keep a
        long-lived view, such as a background exporter or a custom front end.

        Returns:
            callable: Removes the subscription when called.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            callback()

    def _commit(self, action, *args):
        """Runs a store mutation, recovering from write failures, then notifies."""
        try:
            result = action(*args)
        except StorageError:
            logger.exception("storage_write_failed", action=action.__name__)
            result = None
        self._notify()
        return result

    # Session

    @property
    def user(self):
        return self._session.current_user

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == Role.ADMIN

    def login(self, email: str, password: str) -> bool:
        """Signs a user in. Returns False for any unknown email or wrong password."""
        try:
            ok = self._session.login(email, password)
        except StorageError:
            # Credentials matched; only the session snapshot was not saved.
            logger.exception("storage_write_failed", action="login")
            ok = True
        if ok:
            self._notify()
        return ok

    def logout(self) -> None:
        self._commit(self._session.logout)

    # Records

    @property
    def patients(self) -> list:
        return self._records.patients

    @property
    def incidents(self) -> list:
        return self._records.incidents

    def get_patient(self, patient_id):
        return self._records.get_patient(patient_id)

    def get_incident(self, incident_id):
        return self._records.get_incident(incident_id)

    def add_patient(self, data):
        return self._commit(self._records.add_patient, data)

    def update_patient(self, patient_id, changes) -> None:
        self._commit(self._records.update_patient, patient_id, changes)

    def delete_patient(self, patient_id) -> None:
        self._commit(self._records.delete_patient, patient_id)

    def add_incident(self, data):
        return self._commit(self._records.add_incident, data)

    def update_incident(self, incident_id, changes) -> None:
        self._commit(self._records.update_incident, incident_id, changes)

    def delete_incident(self, incident_id) -> None:
        self._commit(self._records.delete_incident, incident_id)

    def get_patient_incidents(self, patient_id) -> list:
        return self._records.get_patient_incidents(patient_id)

    # Role-scoped reads

    def current_patient(self):
        """Returns the Patient record of a signed-in Patient-role user, if it exists."""
        if self.user is None or self.user.role != Role.PATIENT:
            return None
        return self.get_patient(self.user.patient_id)

    def visible_incidents(self) -> list:
        """Incidents the signed-in user may see: all for admins, their own for patients."""
        if self.user is None:
            return []
        if self.user.role == Role.ADMIN:
            return self.incidents
        return self.get_patient_incidents(self.user.patient_id)

    # Files

    async def upload_file(self, blob):
        """Ingests one uploaded file. Raises `FileReadError` if it cannot be read."""
        return await self._files.upload_file(blob)

    async def upload_files(self, blobs):
        """Ingests several files; failures are reported per file in the result."""
        return await self._files.upload_files(blobs)
