"""
Derived statistics for the dashboards, calendar and reports pages.

Every function here is pure: it reads sequences of records and returns new
values without touching the store. `now` can be passed in so results are
reproducible in tests.
"""
# dentalcare/reports.py

from collections import Counter
from datetime import date, datetime

from dentalcare.models import IncidentStatus

PENDING_STATUSES = (IncidentStatus.SCHEDULED, IncidentStatus.IN_PROGRESS)


def _now(now):
    return now or datetime.now()


def is_upcoming(incident, now=None) -> bool:
    """True when the appointment is at or after `now`."""
    return incident.appointment_date >= _now(now)


def upcoming_appointments(incidents, now=None, include_cancelled=False, limit=None) -> list:
    """Returns upcoming appointments, soonest first.

    Args:
        incidents (Iterable[Incident]): Appointments to filter.
        now (datetime, optional): Reference time; defaults to the local clock.
        include_cancelled (bool): Keep cancelled appointments in the result.
        limit (int, optional): Maximum number of appointments to return.

    Returns:
        list[Incident]: Matching appointments sorted by appointment date.
    """
    now = _now(now)
    result = [
        i for i in incidents
        if is_upcoming(i, now) and (include_cancelled or i.status != IncidentStatus.CANCELLED)
    ]
    result.sort(key=lambda i: i.appointment_date)
    return result[:limit] if limit is not None else result


def past_appointments(incidents, now=None) -> list:
    """Returns appointments before `now`, most recent first."""
    now = _now(now)
    result = [i for i in incidents if i.appointment_date < now]
    result.sort(key=lambda i: i.appointment_date, reverse=True)
    return result


def completed(incidents) -> list:
    return [i for i in incidents if i.status == IncidentStatus.COMPLETED]


def total_revenue(incidents) -> float:
    """Sums the cost of completed incidents; missing costs count as zero."""
    return sum(i.cost or 0 for i in completed(incidents))


def pending_treatments(incidents) -> list:
    return [i for i in incidents if i.status in PENDING_STATUSES]


def status_counts(incidents) -> dict:
    """Counts incidents per status. Every status appears, in declaration order."""
    counts = Counter(i.status for i in incidents)
    return {status.value: counts.get(status, 0) for status in IncidentStatus}


def _shift_month(year, month, offset):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_revenue(incidents, now=None, months=6) -> list:
    """Completed revenue for each of the last `months` calendar months.

    The current month is included and the list runs oldest first. Each entry is
    a dict with `month` (e.g. "Jul 2024"), `revenue` and `appointments`.
    """
    now = _now(now)
    done = completed(incidents)
    result = []
    for offset in range(-(months - 1), 1):
        year, month = _shift_month(now.year, now.month, offset)
        in_month = [
            i for i in done
            if i.appointment_date.year == year and i.appointment_date.month == month
        ]
        result.append({
            "month": date(year, month, 1).strftime("%b %Y"),
            "revenue": sum(i.cost or 0 for i in in_month),
            "appointments": len(in_month),
        })
    return result


def treatment_type_counts(incidents, limit=6) -> list:
    """Ranks incident titles by frequency as (title, count) pairs."""
    return Counter(i.title for i in incidents).most_common(limit)


def top_patients(patients, incidents, limit=5) -> list:
    """Patients ranked by number of visits, with their completed spend."""
    visits = Counter(i.patient_id for i in incidents)
    spent = Counter()
    for incident in completed(incidents):
        spent[incident.patient_id] += incident.cost or 0
    ranked = [
        {"patient_id": p.id, "name": p.name, "visits": visits.get(p.id, 0), "total_spent": spent.get(p.id, 0)}
        for p in patients
    ]
    ranked.sort(key=lambda row: row["visits"], reverse=True)
    return ranked[:limit]


def appointments_on(incidents, day: date) -> list:
    """Appointments whose date falls on `day`, in time order."""
    result = [i for i in incidents if i.appointment_date.date() == day]
    result.sort(key=lambda i: i.appointment_date)
    return result


def appointments_by_day(incidents, year: int, month: int) -> dict:
    """Groups one month's appointments by day of month for the calendar grid."""
    grouped = {}
    for incident in sorted(incidents, key=lambda i: i.appointment_date):
        when = incident.appointment_date
        if when.year == year and when.month == month:
            grouped.setdefault(when.day, []).append(incident)
    return grouped


def admin_summary(patients, incidents, now=None) -> dict:
    """The figures shown on the admin dashboard."""
    now = _now(now)
    return {
        "total_patients": len(patients),
        "upcoming_appointments": len(upcoming_appointments(incidents, now)),
        "completed_treatments": len(completed(incidents)),
        "total_revenue": total_revenue(incidents),
        "pending_treatments": len(pending_treatments(incidents)),
        "in_progress": sum(1 for i in incidents if i.status == IncidentStatus.IN_PROGRESS),
        "scheduled": sum(1 for i in incidents if i.status == IncidentStatus.SCHEDULED),
    }


def patient_summary(incidents, patient_id, now=None) -> dict:
    """The figures shown on a patient's own dashboard."""
    now = _now(now)
    own = [i for i in incidents if i.patient_id == patient_id]
    return {
        "total_appointments": len(own),
        "upcoming_appointments": len(upcoming_appointments(own, now)),
        "completed_treatments": len(completed(own)),
        "total_spent": total_revenue(own),
    }
