"""
UI tests for the DentalCare application using Streamlit's AppTest framework.

These tests drive the login form and the role menus the way a user would and
check what the service and session state look like afterwards.
"""
import pytest
from streamlit.testing.v1 import AppTest

from dentalcare.models import IncidentStatus, Role


def _login_app(service):
    def render(svc):
        import gui as gui_module

        gui_module.show_login_form(svc)

    app = AppTest.from_function(render, args=(service,), default_timeout=15)
    app.run()
    return app


def _main_app(service):
    def render(svc):
        import gui as gui_module

        gui_module.show_main_app(svc)

    app = AppTest.from_function(render, args=(service,), default_timeout=15)
    app.run()
    return app


def test_ui_login_rejects_invalid_credentials(service):
    """
    Verifies that a wrong password shows the generic error and signs nobody in.
    """
    app = _login_app(service)
    app.text_input[0].input("admin@entnt.in")
    app.text_input[1].input("not-the-password")
    buttons = {btn.label: btn for btn in app.button}
    buttons["Sign In"].click().run()

    assert any("Invalid email or password" in err.value for err in app.error)
    assert service.user is None


def test_ui_login_requires_both_fields(service):
    app = _login_app(service)
    buttons = {btn.label: btn for btn in app.button}
    buttons["Sign In"].click().run()
    assert any("required" in err.value for err in app.error)


def test_ui_login_success_signs_in(service):
    app = _login_app(service)
    app.text_input[0].input("admin@entnt.in")
    app.text_input[1].input("admin123")
    buttons = {btn.label: btn for btn in app.button}
    buttons["Sign In"].click().run()

    assert service.user is not None
    assert service.user.role == Role.ADMIN


def test_ui_admin_menu_navigates_to_patients(admin_service):
    """
    Tests that the admin menu lists the admin pages and opens the patient list.
    """
    app = _main_app(admin_service)
    assert any("Admin Dashboard" in md.value for md in app.markdown)

    buttons = {btn.label: btn for btn in app.button}
    assert {"Dashboard", "Patients", "Appointments", "Calendar", "Reports"} <= set(buttons)
    buttons["Patients"].click().run()
    assert app.session_state["page"] == "admin_patients"
    assert not app.exception


def test_ui_patient_menu_and_logout(patient_service):
    app = _main_app(patient_service)
    assert any("Welcome, John Doe" in md.value for md in app.markdown)

    buttons = {btn.label: btn for btn in app.button}
    buttons["Log Out"].click().run()
    assert patient_service.user is None


def _page_app(service, page, **state):
    def render(svc):
        import gui as gui_module

        gui_module.show_main_app(svc)

    app = AppTest.from_function(render, args=(service,), default_timeout=15)
    app.session_state["page"] = page
    for key, value in state.items():
        app.session_state[key] = value
    app.run()
    return app


def _labelled(elements, label):
    return [el for el in elements if el.label == label]


@pytest.mark.parametrize(
    "page",
    ["admin_dashboard", "admin_patients", "admin_appointments", "admin_calendar", "admin_reports"],
)
def test_ui_admin_pages_render(admin_service, page):
    app = _page_app(admin_service, page)
    assert not app.exception
    assert _labelled(app.button, "← Back to Main Menu")


@pytest.mark.parametrize(
    "page",
    ["patient_dashboard", "patient_appointments", "patient_history", "patient_profile"],
)
def test_ui_patient_pages_render(patient_service, page):
    app = _page_app(patient_service, page)
    assert not app.exception


def test_ui_add_patient_form(admin_service):
    """
    Tests that submitting the Add Patient form registers the patient.
    """
    app = _page_app(admin_service, "admin_patients")
    _labelled(app.text_input, "Full Name")[0].input("Ann Lee")
    _labelled(app.text_input, "Contact Number")[0].input("555-0199")
    _labelled(app.button, "Save Patient")[0].click().run()

    assert not app.exception
    added = [p for p in admin_service.patients if p.name == "Ann Lee"]
    assert len(added) == 1
    assert added[0].contact == "555-0199"


def test_ui_add_patient_survives_write_failure(failing_service):
    app = _page_app(failing_service, "admin_patients")
    _labelled(app.text_input, "Full Name")[0].input("Ann Lee")
    _labelled(app.text_input, "Contact Number")[0].input("555-0199")
    _labelled(app.button, "Save Patient")[0].click().run()

    assert not app.exception
    assert "Ann Lee" in [p.name for p in failing_service.patients]


def test_ui_book_appointment_form(admin_service):
    app = _page_app(admin_service, "admin_appointments")
    _labelled(app.text_input, "Title")[0].input("Emergency Visit")
    _labelled(app.button, "Save Appointment")[0].click().run()

    assert not app.exception
    booked = [i for i in admin_service.incidents if i.title == "Emergency Visit"]
    assert len(booked) == 1
    assert booked[0].patient_id == "p1"
    assert booked[0].status == IncidentStatus.SCHEDULED


def test_ui_edit_appointment_removes_attachment(admin_service):
    """
    Tests that clearing an attachment from the edit form drops it from the incident.
    """
    app = _page_app(admin_service, "admin_appointments", editing_incident_id="i3")
    app.multiselect(key="keep_files_i3").set_value([])
    # The booking form comes first; the second save button belongs to the edit form.
    _labelled(app.button, "Save Appointment")[1].click().run()

    assert not app.exception
    assert admin_service.get_incident("i3").files == []
    assert admin_service.get_incident("i3").title == "Composite Filling"


def test_ui_rejected_input_is_shown_as_error(admin_service):
    def render(svc):
        import gui as gui_module

        gui_module._apply(svc.update_incident, "i1", {"status": "Bogus"})

    app = AppTest.from_function(render, args=(admin_service,), default_timeout=15)
    app.run()

    assert not app.exception
    assert any("Could not save" in err.value for err in app.error)
    assert admin_service.get_incident("i1").status == IncidentStatus.COMPLETED
