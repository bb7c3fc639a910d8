"""
Export helpers: CSV and PDF renditions of the lists shown on portal pages.
"""
import csv
import enum
import io
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from fpdf import FPDF

logger = logging.getLogger(__name__)

FOOTER = "iBarangay Management System"


@dataclass
class Column:
    key: str
    header: str
    formatter: Optional[Callable[[Any], str]] = None

    def render(self, row: Any) -> str:
        if isinstance(row, Mapping):
            value = row.get(self.key)
        else:
            value = getattr(row, self.key, None)
        if self.formatter:
            value = self.formatter(value)
        if isinstance(value, enum.Enum):
            value = value.value
        return "" if value is None else str(value)


def format_date(value: Optional[datetime]) -> str:
    return f"{value:%b} {value.day}, {value.year}" if value else "N/A"


def format_datetime(value: Optional[datetime]) -> str:
    return f"{value:%b} {value.day}, {value.year} {value.hour % 12 or 12}:{value:%M %p}" if value else "N/A"


def format_person(user: Any) -> str:
    return user.full_name if user else "N/A"


def convert_to_csv(rows: Sequence[Any], columns: Sequence[Column]) -> str:
    """Every cell quoted, embedded quotes doubled, rows joined by newlines."""
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([col.header for col in columns])
    for row in rows:
        writer.writerow([col.render(row) for col in columns])
    return buffer.getvalue().rstrip("\n")


def _timestamped(directory: str, filename: str, extension: str, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H-%M")
    return Path(directory) / f"{filename}_{stamp}.{extension}"


def export_to_csv(rows: Sequence[Any], columns: Sequence[Column], filename: str, directory: str = ".") -> Path:
    path = _timestamped(directory, filename, "csv")
    path.write_text(convert_to_csv(rows, columns), encoding="utf-8")
    logger.info(f"Exported {len(rows)} rows to {path}")
    return path


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1.
    return text.encode("latin-1", "replace").decode("latin-1")


def render_pdf(rows: Sequence[Any], columns: Sequence[Column], title: str, now: Optional[datetime] = None) -> bytes:
    now = now or datetime.now()
    generated = f"{now:%B} {now.day}, {now.year} {now.hour % 12 or 12}:{now:%M %p}"

    pdf = FPDF(orientation="L", unit="mm", format="A4")
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, _latin1(title), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", size=10)
    pdf.set_text_color(107, 114, 128)
    pdf.cell(0, 8, _latin1(f"Generated on {generated} | Total Records: {len(rows)}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)

    width = pdf.epw / max(1, len(columns))
    pdf.set_text_color(31, 41, 55)
    pdf.set_fill_color(243, 244, 246)
    pdf.set_font("Helvetica", "B", 9)
    for col in columns:
        pdf.cell(width, 8, _latin1(col.header), border=1, fill=True)
    pdf.ln(8)

    pdf.set_font("Helvetica", size=8)
    for index, row in enumerate(rows):
        pdf.set_fill_color(249, 250, 251)
        for col in columns:
            text = _latin1(col.render(row))
            # keep each row on one line
            while text and pdf.get_string_width(text) > width - 2:
                text = text[:-1]
            pdf.cell(width, 7, text, border=1, fill=index % 2 == 1)
        pdf.ln(7)

    pdf.ln(6)
    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(156, 163, 175)
    pdf.cell(0, 6, FOOTER, align="C")
    return bytes(pdf.output())


def export_to_pdf(
    rows: Sequence[Any], columns: Sequence[Column], title: str, filename: str, directory: str = "."
) -> Path:
    path = _timestamped(directory, filename, "pdf")
    path.write_bytes(render_pdf(rows, columns, title))
    logger.info(f"Exported {len(rows)} rows to {path}")
    return path


class Exporter:
    """Pre-configured CSV/PDF export for one kind of record."""

    def __init__(self, rows: Iterable[Any], columns: List[Column], title: str, filename: str):
        self.rows = list(rows)
        self.columns = columns
        self.title = title
        self.filename = filename

    def to_csv(self, directory: str = ".") -> Path:
        return export_to_csv(self.rows, self.columns, self.filename, directory)

    def to_pdf(self, directory: str = ".") -> Path:
        return export_to_pdf(self.rows, self.columns, self.title, self.filename, directory)


COMPLAINT_COLUMNS = [
    Column("id", "ID"),
    Column("title", "Title"),
    Column("category", "Category"),
    Column("status", "Status"),
    Column("priority", "Priority"),
    Column("user", "Submitted By", format_person),
    Column("created_at", "Date Submitted", format_date),
    Column("updated_at", "Last Updated", format_date),
]

SERVICE_COLUMNS = [
    Column("id", "ID"),
    Column("request_type", "Type"),
    Column("item_name", "Item/Facility"),
    Column("status", "Status"),
    Column("purpose", "Purpose"),
    Column("user", "Requested By", format_person),
    Column("borrow_date", "Date Needed", format_date),
    Column("created_at", "Date Requested", format_date),
]

AUDIT_LOG_COLUMNS = [
    Column("timestamp", "Timestamp", format_datetime),
    Column("user", "User", lambda user: user.full_name if user else "Unknown"),
    Column("action", "Action"),
    Column("resource", "Resource"),
    Column("ip_address", "IP Address"),
    Column("status", "Status"),
]

USER_COLUMNS = [
    Column("id", "ID"),
    Column("full_name", "Name"),
    Column("email", "Email"),
    Column("role", "Role"),
    Column("phone_number", "Phone"),
    Column("address", "Address"),
    Column("is_verified", "Verified", lambda verified: "Yes" if verified else "No"),
]


def export_complaints(complaints: Iterable[Any]) -> Exporter:
    return Exporter(complaints, COMPLAINT_COLUMNS, "Complaints Report", "complaints")


def export_services(services: Iterable[Any]) -> Exporter:
    return Exporter(services, SERVICE_COLUMNS, "Service Requests Report", "service_requests")


def export_audit_logs(logs: Iterable[Any]) -> Exporter:
    return Exporter(logs, AUDIT_LOG_COLUMNS, "Audit Logs Report", "audit_logs")


def export_users(users: Iterable[Any]) -> Exporter:
    return Exporter(users, USER_COLUMNS, "Users Report", "users")
