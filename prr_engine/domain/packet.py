"""Markdown case packet and document-library layout for archiving a case."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Union

import yaml

from prr_engine.domain.models.case import CaseRecord

# Massachusetts fiscal year starts July 1
FISCAL_YEAR_START_MONTH = 7


@dataclass(frozen=True)
class CasePacket:
    filename: str
    folder: List[str]
    content: str

    @property
    def archive_path(self) -> str:
        return "/".join(self.folder + [self.filename])


def fiscal_year_folder(value: Union[date, datetime]) -> str:
    start_year = value.year if value.month >= FISCAL_YEAR_START_MONTH else value.year - 1
    return f"FY{start_year}-{start_year + 1}"


def case_folder_segments(record: CaseRecord, library_root: str) -> List[str]:
    return [
        library_root,
        fiscal_year_folder(record.intake.received_at),
        record.environment,
        record.module,
        record.case_id,
    ]


def case_packet_filename(record: CaseRecord) -> str:
    return f"{record.case_id}.md"


def _frontmatter(record: CaseRecord) -> str:
    requester = {"name": record.requester.name}
    if record.requester.email:
        requester["email"] = record.requester.email
    if record.requester.phone:
        requester["phone"] = record.requester.phone
    data = {
        "caseId": record.case_id,
        "environment": record.environment,
        "module": record.module,
        "status": record.status.value,
        "receivedAt": record.intake.received_at.isoformat(),
        "t10": record.deadlines.t10.isoformat(),
        "requester": requester,
    }
    body = yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)
    return f"---\n{body}---\n"


def _audit_line(at: datetime, actor: str, action: str, detail: str | None) -> str:
    line = f"- {at.isoformat()} | {actor} | {action}"
    if detail:
        line += f" | {detail}"
    return line


def encode_case_packet(record: CaseRecord) -> str:
    """Render the case as a Markdown packet with YAML front matter."""
    lines = [
        "# Public Records Request (PRR)",
        "",
        f"**Case ID:** {record.case_id}",
        "",
        "## Request",
        "",
        record.intake.request_text,
        "",
        "## Deadlines",
        "",
        f"- **T10 (10 business days):** {record.deadlines.t10.isoformat()}",
    ]
    if record.deadlines.reminder_t3 is not None:
        lines.append(f"- **T3 reminder:** {record.deadlines.reminder_t3.isoformat()}")
    if record.deadlines.reminder_t1 is not None:
        lines.append(f"- **T1 reminder:** {record.deadlines.reminder_t1.isoformat()}")
    if record.attachments:
        lines += ["", "## Attachments", ""]
        lines += [f"- {a.name}" for a in record.attachments]
    lines += ["", "## Audit Log", ""]
    lines += [_audit_line(e.at, e.actor, e.action, e.detail) for e in record.audit_log]
    return _frontmatter(record) + "\n".join(lines) + "\n"


def build_case_packet(record: CaseRecord, library_root: str) -> CasePacket:
    """Packet content plus where it belongs in the document library."""
    return CasePacket(
        filename=case_packet_filename(record),
        folder=case_folder_segments(record, library_root),
        content=encode_case_packet(record),
    )
