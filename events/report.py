"""Assemble the printable IQAC event report from an event record.

Everything here is a pure transform: no database access, no I/O. Missing
values degrade to ``"N/A"`` and malformed links to an ``Invalid URL`` entry,
so rendering never fails on partial data.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional
from urllib.parse import urlparse

from django.conf import settings
from django.utils import dateformat, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NOT_AVAILABLE = "N/A"
PENDING = "Pending"
MISSING_EVENT_OVERVIEW = "Event details are missing."

INSTITUTION_HEADER = (
    "Adhiyamaan College of Engineering",
    "(An Autonomous Institution)",
    "Dr. M. G. R. Nagar, Hosur",
)
CELL_NAME = "Internal Quality Assurance Cell (IQAC)"
FORM_TITLE = "Event Registration and Approval Form"

DEPARTMENT_RE = re.compile(r"(.*) \((.*)\)")
TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{1,2})(?::\d{1,2})?\s*$")

DATE_FORMAT = "F jS, Y"
DATETIME_FORMAT = "F jS, Y g:i A"


# ───────────────────────────────
#  Input record
# ───────────────────────────────

class SocialMediaLink(BaseModel):
    url: str = ""


class EventRecord(BaseModel):
    """Read-only snapshot of an event as the report needs it."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    objective: Optional[str] = None
    proposed_outcomes: Optional[str] = None
    unique_code: Optional[str] = None
    department_club: Optional[str] = None

    academic_year: Optional[str] = None
    program_driven_by: Optional[str] = None
    quarter: Optional[str] = None
    program_type: Optional[str] = None
    activity_lead_by: Optional[str] = None
    program_theme: Optional[str] = None
    activity_duration_hours: Optional[float] = None
    categories: List[str] = Field(default_factory=list)
    funding_sources: List[str] = Field(default_factory=list)

    event_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    venue_name: Optional[str] = None
    venue_location: Optional[str] = None
    other_venue_details: Optional[str] = None
    mode_of_event: Optional[str] = None

    student_participants: Optional[int] = None
    faculty_participants: Optional[int] = None
    external_participants: Optional[int] = None
    budget_estimate: Optional[float] = None

    social_media_links: List[SocialMediaLink] = Field(default_factory=list)
    report_photo_urls: List[str] = Field(default_factory=list)
    final_report_remarks: Optional[str] = None
    ai_objective: Optional[str] = None

    hod_approval_at: Optional[datetime] = None
    dean_approval_at: Optional[datetime] = None
    principal_approval_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_venue(cls, data: Any) -> Any:
        # Rows joined with their venue arrive as {"venues": {"name", "location"}}.
        if isinstance(data, dict) and isinstance(data.get("venues"), dict):
            data = dict(data)
            venue = data.pop("venues")
            data.setdefault("venue_name", venue.get("name"))
            data.setdefault("venue_location", venue.get("location"))
        return data

    @field_validator("social_media_links", mode="before")
    @classmethod
    def _coerce_links(cls, value: Any) -> Any:
        if not value:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        links = []
        for item in value:
            if isinstance(item, SocialMediaLink):
                links.append(item)
            elif isinstance(item, dict):
                links.append({"url": str(item.get("url") or "")})
            elif item is not None:
                links.append({"url": str(item)})
        return links

    @field_validator("categories", "funding_sources", "report_photo_urls", mode="before")
    @classmethod
    def _coerce_str_list(cls, value: Any) -> Any:
        if not value:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [str(v) for v in value if v is not None]

    @classmethod
    def from_event(cls, event) -> "EventRecord":
        """Build a record from an ``events.Event`` instance."""
        venue = event.venue
        return cls(
            title=event.title,
            objective=event.objective,
            proposed_outcomes=event.proposed_outcomes,
            unique_code=event.unique_code,
            department_club=event.department_club,
            academic_year=event.academic_year,
            program_driven_by=event.program_driven_by,
            quarter=event.quarter,
            program_type=event.program_type,
            activity_lead_by=event.activity_lead_by,
            program_theme=event.program_theme,
            activity_duration_hours=_to_float(event.activity_duration_hours),
            categories=event.categories,
            funding_sources=event.funding_sources,
            event_date=event.event_date,
            end_date=event.end_date,
            start_time=event.start_time,
            end_time=event.end_time,
            venue_name=venue.name if venue else None,
            venue_location=venue.location if venue else None,
            other_venue_details=event.other_venue_details,
            mode_of_event=event.mode_of_event,
            student_participants=event.student_participants,
            faculty_participants=event.faculty_participants,
            external_participants=event.external_participants,
            budget_estimate=_to_float(event.budget_estimate),
            social_media_links=event.social_media_links,
            report_photo_urls=event.report_photo_urls,
            final_report_remarks=event.final_report_remarks,
            ai_objective=event.ai_objective,
            hod_approval_at=event.hod_approval_at,
            dean_approval_at=event.dean_approval_at,
            principal_approval_at=event.principal_approval_at,
        )


def _to_float(value) -> Optional[float]:
    return float(value) if value is not None else None


# ───────────────────────────────
#  Output document
# ───────────────────────────────

@dataclass(frozen=True)
class SocialLink:
    url: str
    platform: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.platform is not None


@dataclass
class ReportField:
    label: str
    value: Any
    full_width: bool = False

    @property
    def links(self) -> List[SocialLink]:
        if isinstance(self.value, list):
            return self.value
        return []


@dataclass
class ReportSection:
    key: str
    title: str
    fields: List[ReportField]


@dataclass
class Approval:
    role: str
    status: str


@dataclass
class ReportDocument:
    reference_number: str
    unique_code: str
    academic_year: str
    overview: str
    sections: List[ReportSection]
    objective: Optional[str]
    social_links: ReportField
    photos: List[str]
    remarks: str
    approvals: List[Approval]
    header: tuple = INSTITUTION_HEADER
    cell_name: str = CELL_NAME
    form_title: str = FORM_TITLE
    max_photos: int = 3


# ───────────────────────────────
#  Field formatting
# ───────────────────────────────

def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def academic_year_label(today: Optional[date] = None) -> str:
    """Return ``"YYYY-YYYY"`` starting from the current calendar year."""
    today = today or timezone.localdate()
    return f"{today.year}-{today.year + 1}"


def format_department(value: Optional[str]) -> str:
    """Reorder ``"Name (Degree)"`` into ``"(Degree)-Name"``."""
    if not value:
        return NOT_AVAILABLE
    match = DEPARTMENT_RE.search(value)
    if match and match.group(1) and match.group(2):
        name = match.group(1).strip()
        degree = match.group(2).strip()
        return f"({degree})-{name}"
    return value


def build_reference_number(record: EventRecord, today: Optional[date] = None) -> str:
    prefix = getattr(settings, "REPORT_REFERENCE_PREFIX", "ACE/IQAC/Events")
    return "/".join(
        [
            prefix,
            academic_year_label(today),
            format_department(record.department_club),
            record.unique_code or NOT_AVAILABLE,
        ]
    )


def format_time_12_hour(value: Optional[str]) -> str:
    """Convert ``"HH:MM"`` to ``"HH:MM AM/PM"``; unparseable input is returned as-is."""
    if not value:
        return NOT_AVAILABLE
    match = TIME_RE.match(str(value))
    if not match:
        return value
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return value
    period = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12:02d}:{minute:02d} {period}"


def format_date(value: Optional[date]) -> str:
    if not value:
        return NOT_AVAILABLE
    return dateformat.format(value, DATE_FORMAT)


def format_approval(timestamp: Optional[datetime]) -> str:
    if not timestamp:
        return PENDING
    if timezone.is_aware(timestamp):
        timestamp = timezone.localtime(timestamp)
    return f"Approved on {dateformat.format(timestamp, DATETIME_FORMAT)}"


def format_budget(amount: Optional[float]) -> str:
    return f"₹{(amount or 0):.2f}"


def platform_name(url: str) -> Optional[str]:
    """Derive a display name from a URL's domain, e.g. ``www.facebook.com`` -> ``Facebook``.

    Returns ``None`` when the URL cannot be parsed or has no host.
    """
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not hostname:
        return None
    domain = hostname.replace("www.", "", 1).split(".")[0]
    return _capitalize_first(domain)


def _link_url(item) -> str:
    if isinstance(item, SocialMediaLink):
        return item.url
    if isinstance(item, dict):
        return str(item.get("url") or "")
    return ""


def display_value(value: Any):
    """Normalise a record value for the two-column report layout.

    Empty values become ``"N/A"``. Lists of strings are joined with each
    entry capitalised and underscores turned into spaces; lists of link
    objects become :class:`SocialLink` entries.
    """
    if value is None or value == "" or (value == 0 and not isinstance(value, bool)):
        return NOT_AVAILABLE
    if isinstance(value, (list, tuple)):
        if not value:
            return NOT_AVAILABLE
        first = value[0]
        if isinstance(first, str):
            return ", ".join(
                _capitalize_first(str(item)[:1]) + str(item)[1:].replace("_", " ")
                for item in value
            )
        if _link_url(first):
            return [SocialLink(url=_link_url(item), platform=platform_name(_link_url(item))) for item in value]
        return json.dumps(
            [item.model_dump() if isinstance(item, BaseModel) else item for item in value],
            default=str,
        )
    if isinstance(value, str):
        return NOT_AVAILABLE if value.strip() == "" else value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_venue(record: EventRecord) -> str:
    if record.venue_name:
        return f"{record.venue_name} ({record.venue_location or NOT_AVAILABLE})"
    return record.other_venue_details or NOT_AVAILABLE


def generate_report_overview(record: Optional[EventRecord]) -> str:
    """Three-sentence summary built locally from the record's own fields."""
    if record is None:
        return MISSING_EVENT_OVERVIEW

    title = record.title or "The event"
    objective = record.objective or "achieve its goals"
    outcomes = record.proposed_outcomes or "positive results"

    summary = [
        f'The program, "{title}", was successfully conducted with the primary aim to {objective.lower()}.',
        f"The activity was well-received, resulting in {outcomes.lower()}.",
        "Overall, the event achieved its intended purpose, contributing positively "
        "to the participants' learning and skill development.",
    ]
    return " ".join(summary)


# ───────────────────────────────
#  Assembly
# ───────────────────────────────

def assemble_report(record: EventRecord, today: Optional[date] = None) -> ReportDocument:
    """Render ``record`` into the fixed IQAC report layout.

    ``today`` only feeds the academic year in the reference number; pass it
    to get a reproducible document.
    """
    mode = _capitalize_first(record.mode_of_event) if record.mode_of_event else NOT_AVAILABLE

    sections = [
        ReportSection(
            key="program",
            title="Program Details",
            fields=[
                ReportField("Academic Year", display_value(record.academic_year)),
                ReportField("Program driven by", display_value(record.program_driven_by)),
                ReportField("Quarter", display_value(record.quarter)),
                ReportField("Program/Activity Name", display_value(record.title)),
                ReportField("Program Type", display_value(record.program_type)),
                ReportField("Activity Lead By", display_value(record.activity_lead_by)),
                ReportField("Program Theme", display_value(record.program_theme)),
                ReportField(
                    "Duration of the activity (In Hrs)",
                    display_value(record.activity_duration_hours),
                ),
                ReportField("Event Category", display_value(record.categories)),
                ReportField("Funding Source", display_value(record.funding_sources)),
            ],
        ),
        ReportSection(
            key="schedule",
            title="Schedule & Venue",
            fields=[
                ReportField("Start Date", format_date(record.event_date)),
                ReportField("End Date", format_date(record.end_date)),
                ReportField("Start Time", format_time_12_hour(record.start_time)),
                ReportField("End Time", format_time_12_hour(record.end_time)),
                ReportField("Venue", format_venue(record), full_width=True),
            ],
        ),
        ReportSection(
            key="participants",
            title="Participants & Expenditure",
            fields=[
                ReportField(
                    "Number of Student Participants",
                    display_value(record.student_participants),
                ),
                ReportField(
                    "Number of Faculty Participants",
                    display_value(record.faculty_participants),
                ),
                ReportField(
                    "Number of External Participants, if any",
                    display_value(record.external_participants),
                ),
                ReportField("Expenditure Amount, If any", format_budget(record.budget_estimate)),
                ReportField("Mode of Session delivery", mode),
                ReportField("Department/Club", display_value(record.department_club)),
            ],
        ),
    ]

    approvals = [
        Approval("HOD", format_approval(record.hod_approval_at)),
        Approval("Dean IR", format_approval(record.dean_approval_at)),
        Approval("Principal", format_approval(record.principal_approval_at)),
    ]

    return ReportDocument(
        reference_number=build_reference_number(record, today),
        unique_code=record.unique_code or NOT_AVAILABLE,
        academic_year=academic_year_label(today),
        overview=generate_report_overview(record),
        sections=sections,
        objective=(record.ai_objective or "").strip() or None,
        social_links=ReportField(
            "Video/Social Media Links",
            display_value([link for link in record.social_media_links if link.url]),
        ),
        photos=list(record.report_photo_urls),
        remarks=display_value(record.final_report_remarks),
        approvals=approvals,
        max_photos=getattr(settings, "REPORT_MAX_PHOTOS", 3),
    )
