"""
This module defines the graphical user interface (GUI) for the DentalCare application using Streamlit.

It renders the login page and the role-specific areas of the portal:
- Admins get a dashboard, patient management, appointment management,
  a calendar and a reports page.
- Patients get their own dashboard, their appointments, their treatment
  history with downloadable attachments, and their profile.

Every page reads from and writes through the `DentalCareService` handed in by
`main.py`; no business rules live here.
"""
# gui.py

import asyncio
import datetime

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from dentalcare import reports
from dentalcare.files import decode_data_url
from dentalcare.models import IncidentStatus, Role

STATUS_ICONS = {
    IncidentStatus.SCHEDULED: "🟡",
    IncidentStatus.IN_PROGRESS: "🔵",
    IncidentStatus.COMPLETED: "🟢",
    IncidentStatus.CANCELLED: "🔴",
}

DEMO_ACCOUNTS = [
    ("Admin", "admin@entnt.in", "admin123"),
    ("Patient", "john@entnt.in", "patient123"),
]


def _format_datetime(value, fmt="%b %d, %Y - %I:%M %p"):
    """Formats a date or datetime for display, tolerating missing values."""
    if value is None:
        return "—"
    return value.strftime(fmt)


def _format_money(amount):
    return f"${amount:,.2f}" if amount is not None else "—"


def _status_label(status):
    return f"{STATUS_ICONS.get(status, '')} {status.value}"


def _patient_names(service):
    return {p.id: p.name for p in service.patients}


def _render_attachments(files, key_prefix):
    """Shows a download button for each attachment of an incident.

    Args:
        files (list[FileAttachment]): The attachments to list.
        key_prefix (str): Prefix making widget keys unique on the page.
    """
    if not files:
        return
    st.markdown("**Attachments**")
    for attachment in files:
        try:
            mime_type, payload = decode_data_url(attachment.url)
        except ValueError:
            st.caption(f"{attachment.name} (unavailable)")
            continue
        st.download_button(
            f"⬇ {attachment.name} ({attachment.size / 1024:.1f} KB)",
            data=payload,
            file_name=attachment.name,
            mime=mime_type,
            key=f"{key_prefix}_{attachment.id}",
        )


def _apply(action, *args):
    """Runs a service mutation, showing rejected input as a form error.

    Returns:
        bool: True if the change was accepted.
    """
    try:
        action(*args)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        st.error(f"Could not save: {problems}")
        return False
    return True


def _upload_attachments(service, uploaded_files):
    """Ingests uploaded files, reporting any that fail without dropping the rest."""
    if not uploaded_files:
        return []
    batch = asyncio.run(service.upload_files(uploaded_files))
    for failure in batch.failures:
        st.error(str(failure))
    return batch.attachments


# Authentication Pages
def show_login_form(service):
    """Displays the login form and handles user authentication.

    Args:
        service: The main application service instance.
    """
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown("<h1 style='text-align: center;'>🦷 DentalCare</h1>", unsafe_allow_html=True)
        st.markdown("<p style='text-align: center;'>Sign in to the clinic portal.</p>", unsafe_allow_html=True)
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", use_container_width=True)

            if submitted:
                if not email or not password:
                    st.error("Email and password are required.")
                elif service.login(email, password):
                    st.session_state.page = None
                    st.rerun()
                else:
                    st.error("Invalid email or password.")

        with st.expander("Demo accounts"):
            for role, demo_email, demo_password in DEMO_ACCOUNTS:
                st.write(f"**{role}:** {demo_email} / {demo_password}")


# Main Application UI
def show_main_app(service):
    """
    Routes a signed-in user to their menu or to the page they picked.

    Args:
        service: The main application service instance.
    """
    user = service.user
    if 'page' not in st.session_state:
        st.session_state.page = None

    if user.role == Role.ADMIN:
        title = "Admin Dashboard"
        menu_items = [
            ("Dashboard", "admin_dashboard", "Today's figures and the next appointments."),
            ("Patients", "admin_patients", "Register, edit and remove patient records."),
            ("Appointments", "admin_appointments", "Book appointments and record treatments."),
            ("Calendar", "admin_calendar", "See appointments by day."),
            ("Reports", "admin_reports", "Revenue, status breakdown and top patients."),
        ]
        pages = {
            "admin_dashboard": _render_admin_dashboard,
            "admin_patients": _render_patients_page,
            "admin_appointments": _render_appointments_page,
            "admin_calendar": _render_calendar_page,
            "admin_reports": _render_reports_page,
        }
    else:
        patient = service.current_patient()
        title = f"Welcome, {patient.name}" if patient else "Patient Portal"
        menu_items = [
            ("Dashboard", "patient_dashboard", "Your upcoming visits at a glance."),
            ("My Appointments", "patient_appointments", "Upcoming and past appointments."),
            ("Medical History", "patient_history", "Treatments, costs and files."),
            ("My Profile", "patient_profile", "Your contact and health details."),
        ]
        pages = {
            "patient_dashboard": _render_patient_dashboard,
            "patient_appointments": _render_my_appointments_page,
            "patient_history": _render_medical_history_page,
            "patient_profile": _render_patient_profile_page,
        }

    if st.session_state.page is None:
        st.markdown(f"## {title}")
        st.caption(f"Signed in as {user.email}")
        st.divider()
        for idx, (label, value, description) in enumerate(menu_items):
            if st.button(label, key=f"menu_btn_{idx}", use_container_width=True):
                st.session_state.page = value
                st.rerun()
            st.caption(description)
        st.divider()
        if st.button("Log Out", key="logout_btn", use_container_width=True):
            service.logout()
            st.session_state.page = None
            st.rerun()
        return

    render = pages.get(st.session_state.page)
    if render is None:
        st.session_state.page = None
        st.rerun()
        return
    if st.button("← Back to Main Menu"):
        st.session_state.page = None
        st.rerun()
    render(service)


# Admin pages
def _render_admin_dashboard(service):
    st.markdown("<h2 style='text-align: center;'>Clinic Overview</h2>", unsafe_allow_html=True)
    summary = reports.admin_summary(service.patients, service.incidents)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Patients", summary["total_patients"])
    c2.metric("Upcoming", summary["upcoming_appointments"])
    c3.metric("Completed", summary["completed_treatments"])
    c4.metric("Revenue", _format_money(summary["total_revenue"]))

    c5, c6 = st.columns(2)
    c5.metric("Scheduled", summary["scheduled"])
    c6.metric("In Progress", summary["in_progress"])

    st.subheader("Next Appointments")
    upcoming = reports.upcoming_appointments(service.incidents, limit=10)
    if not upcoming:
        st.info("No upcoming appointments.")
        return
    names = _patient_names(service)
    st.dataframe(
        pd.DataFrame([
            {
                "When": _format_datetime(i.appointment_date),
                "Patient": names.get(i.patient_id, "Unknown patient"),
                "Title": i.title,
                "Status": i.status.value,
            }
            for i in upcoming
        ]),
        use_container_width=True,
        hide_index=True,
    )


def _patient_form(key, patient=None):
    """Renders the patient fields and returns their values when submitted."""
    with st.form(key):
        name = st.text_input("Full Name", value=patient.name if patient else "")
        dob = st.date_input(
            "Date of Birth",
            value=patient.dob if patient else datetime.date(1990, 1, 1),
            min_value=datetime.date(1900, 1, 1),
        )
        contact = st.text_input("Contact Number", value=patient.contact if patient else "")
        email = st.text_input("Email", value=(patient.email or "") if patient else "")
        address = st.text_input("Address", value=(patient.address or "") if patient else "")
        blood_group = st.text_input("Blood Group", value=(patient.blood_group or "") if patient else "")
        allergies = st.text_input("Allergies", value=(patient.allergies or "") if patient else "")
        emergency_contact = st.text_input(
            "Emergency Contact", value=(patient.emergency_contact or "") if patient else ""
        )
        health_info = st.text_area("Health Notes", value=patient.health_info if patient else "")
        submitted = st.form_submit_button("Save Patient")

    if not submitted:
        return None
    if not name or not contact:
        st.error("Name and contact number are required.")
        return None
    return {
        "name": name,
        "dob": dob,
        "contact": contact,
        "email": email or None,
        "address": address or None,
        "blood_group": blood_group or None,
        "allergies": allergies or None,
        "emergency_contact": emergency_contact or None,
        "health_info": health_info,
    }


def _render_patients_page(service):
    """Lists patients and lets an admin add, edit or delete them."""
    st.markdown("<h2 style='text-align: center;'>Patients</h2>", unsafe_allow_html=True)
    patients = service.patients
    if patients:
        st.dataframe(
            pd.DataFrame([
                {
                    "ID": p.id,
                    "Name": p.name,
                    "Date of Birth": _format_datetime(p.dob, "%b %d, %Y"),
                    "Contact": p.contact,
                    "Blood Group": p.blood_group or "",
                    "Appointments": len(service.get_patient_incidents(p.id)),
                }
                for p in patients
            ]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No patients registered yet.")

    with st.expander("Add Patient"):
        values = _patient_form("add_patient_form")
        if values and _apply(service.add_patient, values):
            st.success(f"Patient {values['name']} added.")
            st.rerun()

    if not patients:
        return
    options = {f"{p.name} ({p.id})": p.id for p in patients}
    selected = st.selectbox("Select a patient to edit or delete", list(options))
    patient = service.get_patient(options[selected])
    if patient is None:
        return

    with st.expander(f"Edit {patient.name}"):
        values = _patient_form(f"edit_patient_form_{patient.id}", patient)
        if values and _apply(service.update_patient, patient.id, values):
            st.success("Patient updated.")
            st.rerun()

    incident_count = len(service.get_patient_incidents(patient.id))
    st.warning(f"Deleting {patient.name} also removes their {incident_count} appointment(s).")
    if st.button("Delete Patient", key=f"delete_patient_{patient.id}"):
        service.delete_patient(patient.id)
        st.success("Patient deleted.")
        st.rerun()


def _incident_form(service, key, incident=None):
    """Renders the appointment fields and returns their values when submitted."""
    names = _patient_names(service)
    if not names:
        st.warning("Register a patient before booking appointments.")
        return None
    patient_ids = list(names)
    statuses = list(IncidentStatus)
    default_when = incident.appointment_date if incident else datetime.datetime.now().replace(second=0, microsecond=0)

    with st.form(key):
        patient_id = st.selectbox(
            "Patient",
            patient_ids,
            index=patient_ids.index(incident.patient_id) if incident and incident.patient_id in names else 0,
            format_func=lambda pid: names[pid],
        )
        title = st.text_input("Title", value=incident.title if incident else "")
        description = st.text_area("Description", value=incident.description if incident else "")
        comments = st.text_area("Comments", value=incident.comments if incident else "")
        day = st.date_input("Appointment Date", value=default_when.date())
        time_of_day = st.time_input("Appointment Time", value=default_when.time())
        status = st.selectbox(
            "Status",
            statuses,
            index=statuses.index(incident.status) if incident else 0,
            format_func=lambda s: s.value,
        )
        cost = st.number_input(
            "Cost",
            min_value=0.0,
            value=float(incident.cost) if incident and incident.cost is not None else 0.0,
        )
        treatment = st.text_area("Treatment", value=(incident.treatment or "") if incident else "")
        has_follow_up = st.checkbox("Schedule a follow-up", value=bool(incident and incident.next_date))
        follow_up = st.date_input(
            "Follow-up Date",
            value=incident.next_date.date() if incident and incident.next_date else datetime.date.today(),
        )
        kept_ids = []
        if incident and incident.files:
            file_names = {f.id: f.name for f in incident.files}
            kept_ids = st.multiselect(
                "Keep attachments",
                list(file_names),
                default=list(file_names),
                format_func=lambda fid: file_names[fid],
                key=f"keep_files_{incident.id}",
            )
        uploads = st.file_uploader("Attach files", accept_multiple_files=True)
        submitted = st.form_submit_button("Save Appointment")

    if not submitted:
        return None
    if not title:
        st.error("A title is required.")
        return None
    files = [f for f in incident.files if f.id in kept_ids] if incident else []
    files.extend(_upload_attachments(service, uploads))
    return {
        "patient_id": patient_id,
        "title": title,
        "description": description,
        "comments": comments,
        "appointment_date": datetime.datetime.combine(day, time_of_day),
        "status": status,
        "cost": cost if cost else None,
        "treatment": treatment or None,
        "next_date": datetime.datetime.combine(follow_up, time_of_day) if has_follow_up else None,
        "files": files,
    }


def _render_appointments_page(service):
    """Lists appointments and lets an admin book, update or cancel them."""
    st.markdown("<h2 style='text-align: center;'>Appointments</h2>", unsafe_allow_html=True)

    with st.expander("Book Appointment"):
        values = _incident_form(service, "add_incident_form")
        if values and _apply(service.add_incident, values):
            st.success("Appointment booked.")
            st.rerun()

    incidents = sorted(service.incidents, key=lambda i: i.appointment_date, reverse=True)
    if not incidents:
        st.info("No appointments yet.")
        return

    names = _patient_names(service)
    status_filter = st.multiselect(
        "Filter by status", list(IncidentStatus), default=list(IncidentStatus), format_func=lambda s: s.value
    )
    for incident in incidents:
        if incident.status not in status_filter:
            continue
        title = (
            f"{_format_datetime(incident.appointment_date)} · {incident.title} · "
            f"{names.get(incident.patient_id, 'Unknown patient')} · {_status_label(incident.status)}"
        )
        with st.expander(title):
            st.write(incident.description or "_No description._")
            if incident.comments:
                st.caption(incident.comments)
            if incident.treatment:
                st.write(f"**Treatment:** {incident.treatment}")
            st.write(f"**Cost:** {_format_money(incident.cost)}")
            if incident.next_date:
                st.write(f"**Follow-up:** {_format_datetime(incident.next_date)}")
            _render_attachments(incident.files, f"admin_{incident.id}")

            if st.session_state.get("editing_incident_id") == incident.id:
                values = _incident_form(service, f"edit_incident_form_{incident.id}", incident)
                if values and _apply(service.update_incident, incident.id, values):
                    st.session_state.editing_incident_id = None
                    st.success("Appointment updated.")
                    st.rerun()
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Edit", key=f"edit_{incident.id}"):
                    st.session_state.editing_incident_id = incident.id
                    st.rerun()
            with c2:
                if st.button("Delete", key=f"delete_{incident.id}"):
                    service.delete_incident(incident.id)
                    st.success("Appointment deleted.")
                    st.rerun()


def _render_calendar_page(service):
    st.markdown("<h2 style='text-align: center;'>Calendar</h2>", unsafe_allow_html=True)
    names = _patient_names(service)
    day = st.date_input("Day", value=datetime.date.today())

    appointments = reports.appointments_on(service.incidents, day)
    st.subheader(_format_datetime(day, "%A, %B %d, %Y"))
    if not appointments:
        st.info("No appointments on this day.")
    for incident in appointments:
        st.write(
            f"**{_format_datetime(incident.appointment_date, '%I:%M %p')}** · {incident.title} · "
            f"{names.get(incident.patient_id, 'Unknown patient')} · {_status_label(incident.status)}"
        )

    st.subheader(_format_datetime(day, "%B %Y"))
    by_day = reports.appointments_by_day(service.incidents, day.year, day.month)
    if not by_day:
        st.caption("Nothing booked this month.")
        return
    st.dataframe(
        pd.DataFrame([
            {"Day": d, "Appointments": len(items), "Titles": ", ".join(i.title for i in items)}
            for d, items in sorted(by_day.items())
        ]),
        use_container_width=True,
        hide_index=True,
    )


def _render_reports_page(service):
    st.markdown("<h2 style='text-align: center;'>Reports</h2>", unsafe_allow_html=True)
    patients, incidents = service.patients, service.incidents

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Patients", len(patients))
    c2.metric("Appointments", len(incidents))
    c3.metric("Completed", len(reports.completed(incidents)))
    c4.metric("Revenue", _format_money(reports.total_revenue(incidents)))

    st.subheader("Appointment Status")
    st.bar_chart(pd.Series(reports.status_counts(incidents), name="Appointments"))

    st.subheader("Monthly Revenue")
    monthly = pd.DataFrame(reports.monthly_revenue(incidents)).set_index("month")
    st.line_chart(monthly["revenue"])

    st.subheader("Treatment Types")
    treatments = reports.treatment_type_counts(incidents)
    if treatments:
        st.bar_chart(pd.DataFrame(treatments, columns=["Treatment", "Count"]).set_index("Treatment"))

    st.subheader("Top Patients")
    top = reports.top_patients(patients, incidents)
    if top:
        st.dataframe(
            pd.DataFrame(top)[["name", "visits", "total_spent"]].rename(
                columns={"name": "Patient", "visits": "Visits", "total_spent": "Total Spent"}
            ),
            use_container_width=True,
            hide_index=True,
        )


# Patient pages
def _render_patient_dashboard(service):
    st.markdown("<h2 style='text-align: center;'>My Dashboard</h2>", unsafe_allow_html=True)
    own = service.visible_incidents()
    summary = reports.patient_summary(own, service.user.patient_id)
    c1, c2, c3 = st.columns(3)
    c1.metric("Upcoming", summary["upcoming_appointments"])
    c2.metric("Completed", summary["completed_treatments"])
    c3.metric("Total Spent", _format_money(summary["total_spent"]))

    st.subheader("Recent Treatments")
    recent = sorted(own, key=lambda i: i.appointment_date, reverse=True)[:5]
    if not recent:
        st.info("No treatments on record.")
    for incident in recent:
        st.write(
            f"{_format_datetime(incident.appointment_date)} · **{incident.title}** · {_status_label(incident.status)}"
        )


def _render_my_appointments_page(service):
    st.markdown("<h2 style='text-align: center;'>My Appointments</h2>", unsafe_allow_html=True)
    own = service.visible_incidents()
    upcoming = reports.upcoming_appointments(own, include_cancelled=True)
    past = reports.past_appointments(own)

    st.subheader(f"Upcoming Appointments ({len(upcoming)})")
    if not upcoming:
        st.info("No upcoming appointments.")
    for incident in upcoming:
        with st.expander(f"{_format_datetime(incident.appointment_date, '%A, %B %d, %Y - %I:%M %p')} · {incident.title}"):
            st.write(incident.description or "_No description._")
            st.write(f"**Status:** {_status_label(incident.status)}")
            if incident.next_date:
                st.write(f"**Next appointment:** {_format_datetime(incident.next_date)}")

    st.subheader(f"Past Appointments ({len(past)})")
    for incident in past:
        with st.expander(f"{_format_datetime(incident.appointment_date, '%A, %B %d, %Y - %I:%M %p')} · {incident.title}"):
            st.write(incident.description or "_No description._")
            st.write(f"**Status:** {_status_label(incident.status)}")
            st.write(f"**Cost:** {_format_money(incident.cost)}")
            _render_attachments(incident.files, f"mine_{incident.id}")


def _render_medical_history_page(service):
    st.markdown("<h2 style='text-align: center;'>Medical History</h2>", unsafe_allow_html=True)
    history = sorted(service.visible_incidents(), key=lambda i: i.appointment_date, reverse=True)
    c1, c2 = st.columns(2)
    c1.metric("Completed Treatments", len(reports.completed(history)))
    c2.metric("Total Cost", _format_money(reports.total_revenue(history)))

    if not history:
        st.info("No treatment history yet.")
    for incident in history:
        with st.expander(f"{_format_datetime(incident.appointment_date)} · {incident.title} · {_status_label(incident.status)}"):
            st.write(incident.description or "_No description._")
            if incident.treatment:
                st.write(f"**Treatment:** {incident.treatment}")
            if incident.comments:
                st.write(f"**Notes:** {incident.comments}")
            st.write(f"**Cost:** {_format_money(incident.cost)}")
            if incident.next_date:
                st.write(f"**Follow-up:** {_format_datetime(incident.next_date, '%B %d, %Y - %I:%M %p')}")
            _render_attachments(incident.files, f"history_{incident.id}")


def _render_patient_profile_page(service):
    st.markdown("<h2 style='text-align: center;'>My Profile</h2>", unsafe_allow_html=True)
    patient = service.current_patient()
    if patient is None:
        st.warning("No patient record is linked to this account.")
        return
    st.write(f"**Name:** {patient.name}")
    st.write(f"**Date of Birth:** {_format_datetime(patient.dob, '%B %d, %Y')}")
    st.write(f"**Contact:** {patient.contact}")
    st.write(f"**Email:** {patient.email or '—'}")
    st.write(f"**Address:** {patient.address or '—'}")
    st.write(f"**Emergency Contact:** {patient.emergency_contact or '—'}")
    st.write(f"**Blood Group:** {patient.blood_group or '—'}")
    st.write(f"**Allergies:** {patient.allergies or '—'}")
    st.write(f"**Health Notes:** {patient.health_info or '—'}")
    st.caption(f"Patient since {_format_datetime(patient.created_at, '%B %d, %Y')}")
