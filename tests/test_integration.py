"""
Integration tests for the DentalCare application.

These tests exercise `DentalCareService` end to end over a real encrypted data
file: the facade, the session and record stores, file ingestion and the
storage substrate working together.
"""
from datetime import datetime

import pytest

from dentalcare import codec
from dentalcare.files import FileBlob, decode_data_url
from dentalcare.models import IncidentStatus, Role
from dentalcare.service import DentalCareService


def test_admin_login_scenario(service):
    assert service.login("admin@entnt.in", "admin123") is True
    assert service.user.role == Role.ADMIN
    assert service.is_admin


def test_wrong_password_keeps_previous_state(admin_service):
    before = admin_service.user
    assert admin_service.login("admin@entnt.in", "wrong") is False
    assert admin_service.user == before


def test_state_survives_restart(service, reopen):
    """
    Tests that a second service opened on the same data file sees identical state.

    Covers patients, incidents (including attachments) and the signed-in user.
    """
    service.login("bob@entnt.in", "patient123")
    patient = service.add_patient({"name": "Ann", "dob": "2000-01-01", "contact": "555"})
    service.add_incident({
        "patient_id": patient.id,
        "title": "Consultation",
        "appointment_date": datetime(2025, 2, 3, 9, 30),
        "cost": 60,
    })
    service.update_patient("p2", {"address": "1 New Road"})

    restarted = DentalCareService(storage=reopen())
    assert restarted.patients == service.patients
    assert restarted.incidents == service.incidents
    assert restarted.user == service.user


def test_cascade_delete_through_service(admin_service, reopen):
    admin_service.delete_patient("p1")
    assert admin_service.get_patient("p1") is None
    assert admin_service.get_patient_incidents("p1") == []
    restarted = DentalCareService(storage=reopen())
    assert [i.id for i in restarted.incidents] == ["i3", "i4", "i6"]


def test_subscribers_see_every_committed_change(service):
    seen = []
    unsubscribe = service.subscribe(lambda: seen.append(len(service.patients)))
    service.add_patient({"name": "Ann", "dob": "2000-01-01", "contact": "555"})
    service.delete_patient("p3")
    service.login("admin@entnt.in", "admin123")
    service.login("admin@entnt.in", "nope")
    unsubscribe()
    service.logout()
    assert seen == [4, 3, 3]


def test_role_scoped_reads(patient_service):
    assert patient_service.current_patient().name == "John Doe"
    assert [i.id for i in patient_service.visible_incidents()] == ["i1", "i2", "i5"]
    patient_service.logout()
    assert patient_service.visible_incidents() == []
    assert patient_service.current_patient() is None
    patient_service.login("admin@entnt.in", "admin123")
    assert patient_service.current_patient() is None
    assert len(patient_service.visible_incidents()) == 6


def test_logout_removes_persisted_session(patient_service, reopen):
    patient_service.logout()
    assert reopen().get_item(codec.SESSION_KEY) is None
    assert DentalCareService(storage=reopen()).user is None


@pytest.mark.asyncio
async def test_uploaded_file_is_stored_with_incident(admin_service, reopen, tmp_path):
    scan = tmp_path / "panoramic.jpg"
    scan.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")
    attachment = await admin_service.upload_file(FileBlob.from_path(scan))

    incident = admin_service.get_incident("i6")
    admin_service.update_incident("i6", {"files": [*incident.files, attachment], "status": "In Progress"})

    stored = DentalCareService(storage=reopen()).get_incident("i6")
    assert stored.status == IncidentStatus.IN_PROGRESS
    assert stored.files == [attachment]
    assert decode_data_url(stored.files[0].url) == ("image/jpeg", b"\xff\xd8\xff\xe0 fake jpeg")


@pytest.mark.asyncio
async def test_batch_upload_through_service(empty_service, tmp_path):
    good = tmp_path / "report.pdf"
    good.write_bytes(b"%PDF")
    batch = await empty_service.upload_files([FileBlob.from_path(good), FileBlob.from_path(tmp_path / "nope.pdf")])
    assert [a.name for a in batch.attachments] == ["report.pdf"]
    assert [f.name for f in batch.failures] == ["nope.pdf"]


def test_storage_failures_do_not_reach_the_caller(failing_service):
    service = failing_service
    assert service.login("bob@entnt.in", "patient123") is True
    assert service.login("admin@entnt.in", "admin123") is True
    patient = service.add_patient({"name": "Ann", "dob": "2000-01-01", "contact": "555"})
    incident = service.add_incident({
        "patient_id": patient.id,
        "title": "Check-up",
        "appointment_date": datetime(2025, 3, 1, 9, 0),
    })
    service.delete_incident("i1")
    service.logout()

    assert patient.name == "Ann"
    assert service.get_patient(patient.id) == patient
    assert service.get_incident(incident.id) == incident
    assert len(service.patients) == 4
    assert service.get_incident("i1") is None
    assert service.user is None


def test_removing_one_attachment_keeps_the_others(admin_service, reopen):
    kept = admin_service.get_incident("i1").files[0]
    dropped = admin_service.get_incident("i3").files[0]
    admin_service.update_incident("i3", {"files": [dropped, kept]})

    admin_service.update_incident("i3", {"files": [kept]})

    assert admin_service.get_incident("i3").files == [kept]
    assert DentalCareService(storage=reopen()).get_incident("i3").files == [kept]
    assert admin_service.get_incident("i1").files == [kept]


def test_empty_service_starts_without_records(empty_service):
    assert empty_service.patients == []
    assert empty_service.incidents == []
    assert empty_service.user is None
