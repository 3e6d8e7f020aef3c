"""
System-level tests for the DentalCare application.

These tests walk through complete clinic workflows across several sessions and
restarts, checking the persisted state at the end rather than individual calls.
"""
from datetime import datetime

import pytest

from dentalcare import reports
from dentalcare.files import FileBlob
from dentalcare.models import IncidentStatus
from dentalcare.service import DentalCareService


@pytest.mark.asyncio
async def test_clinic_day_end_to_end(service, reopen, tmp_path):
    """
    Tests a full day at the clinic.

    The admin registers a patient, books and completes a treatment with an
    X-ray attached, cancels another visit and removes a patient. After a
    restart the reports reflect every change and a seeded patient still sees
    only their own appointments.
    """
    assert service.login("admin@entnt.in", "admin123")
    ann = service.add_patient({
        "name": "Ann Lee",
        "dob": "1995-04-12",
        "contact": "5551234",
        "allergies": "Penicillin",
        "health_info": "Sensitive molars.",
    })
    visit = service.add_incident({
        "patient_id": ann.id,
        "title": "Composite Filling",
        "description": "Upper right molar",
        "appointment_date": datetime(2024, 8, 5, 9, 0),
    })

    xray = tmp_path / "bitewing.png"
    xray.write_bytes(b"\x89PNG fake")
    batch = await service.upload_files([FileBlob.from_path(xray)])
    assert not batch.failures
    service.update_incident(visit.id, {
        "status": "Completed",
        "cost": 180,
        "treatment": "Composite resin filling",
        "files": batch.attachments,
    })
    service.update_incident("i6", {"status": IncidentStatus.CANCELLED})
    service.delete_patient("p3")
    service.logout()

    restarted = DentalCareService(storage=reopen())
    assert restarted.user is None
    assert [p.id for p in restarted.patients] == ["p1", "p2", ann.id]
    assert all(i.patient_id != "p3" for i in restarted.incidents)

    stored = restarted.get_incident(visit.id)
    assert stored.status == IncidentStatus.COMPLETED
    assert stored.cost == 180
    assert [f.name for f in stored.files] == ["bitewing.png"]
    assert stored.description == "Upper right molar"

    summary = reports.admin_summary(restarted.patients, restarted.incidents, now=datetime(2024, 8, 15))
    assert summary["total_patients"] == 3
    # i4 (400) left with p3; the new filling adds 180.
    assert summary["total_revenue"] == 120 + 80 + 150 + 180
    assert summary["upcoming_appointments"] == 1
    assert reports.status_counts(restarted.incidents)["Cancelled"] == 1

    assert restarted.login("john@entnt.in", "patient123")
    assert [i.id for i in restarted.visible_incidents()] == ["i1", "i2", "i5"]


def test_patient_session_is_restored_after_restart(service, reopen):
    assert service.login("jane@entnt.in", "patient123")
    restarted = DentalCareService(storage=reopen())
    assert restarted.user.email == "jane@entnt.in"
    assert restarted.current_patient().name == "Jane Smith"
    assert [i.id for i in restarted.visible_incidents()] == ["i3", "i6"]
