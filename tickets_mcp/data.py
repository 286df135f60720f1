"""
data.py — Persistent data stores for the patient request tickets server
========================================================================
Two stores, both JSON documents on disk, both loaded once at startup:

  - PatientDirectory : patient ID -> {room, nurse}. Read-only reference data.
  - TicketLedger     : ordered list of tickets. Every successful append
                       rewrites the whole document.

A store that cannot be read at startup is replaced by an empty one and the
problem is logged. The server stays reachable; with an empty directory every
logRequest call fails the patient lookup instead of the process failing to boot.
"""

import json
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from tickets_mcp.schema import PatientPlacement, Ticket

logger = logging.getLogger(__name__)

_directory_adapter = TypeAdapter(dict[str, PatientPlacement])
_tickets_adapter = TypeAdapter(list[Ticket])


class PatientNotFoundError(ValueError):
    """Raised when a patient ID is not present in the directory."""

    def __init__(self, patient_id: str):
        super().__init__(f"Patient ID {patient_id} not found in system")
        self.patient_id = patient_id


class LedgerPersistenceError(RuntimeError):
    """Raised when the ticket ledger could not be written to disk."""


def format_timestamp(moment: datetime) -> str:
    """Render a UTC timestamp as ``YYYY-MM-DD HH:MM:SS.mmm+00``."""
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}+00"


def _quarantine(path: Path) -> None:
    """Move an unreadable ticket store aside as ``<name>.corrupt``."""
    target = path.with_name(f"{path.name}.corrupt")
    try:
        path.replace(target)
    except OSError as e:
        logger.error("Could not move unreadable ticket store %s aside: %s", path, e)
        return
    logger.error("Moved unreadable ticket store to %s", target)


# ── Patient directory ─────────────────────────────────────────────────────────

class PatientDirectory:
    def __init__(self, entries: Optional[dict[str, PatientPlacement]] = None):
        self._entries: dict[str, PatientPlacement] = dict(entries or {})

    @classmethod
    def load(cls, path: Path) -> "PatientDirectory":
        """Load the directory from ``path``; any failure yields an empty directory."""
        try:
            entries = _directory_adapter.validate_json(Path(path).read_bytes())
        except (OSError, ValidationError) as e:
            logger.error("Error loading patient directory from %s: %s", path, e)
            return cls()
        return cls(entries)

    def lookup(self, patient_id: str) -> PatientPlacement:
        try:
            return self._entries[patient_id]
        except KeyError:
            raise PatientNotFoundError(patient_id) from None

    def __contains__(self, patient_id: object) -> bool:
        return patient_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# ── Ticket ledger ─────────────────────────────────────────────────────────────

class TicketLedger:
    """
    In-memory ticket collection mirrored to a JSON file.

    One logical writer at a time: the append sequence (read max logId,
    append, persist) is not guarded by a lock.
    """

    def __init__(self, path: Path, directory: PatientDirectory, tickets: Optional[list[Ticket]] = None):
        self.path = Path(path)
        self.directory = directory
        self._tickets: list[Ticket] = list(tickets or [])

    @classmethod
    def load(cls, path: Path, directory: PatientDirectory) -> "TicketLedger":
        """
        Load persisted tickets from ``path``; any failure yields an empty ledger.

        A store that exists but does not validate is renamed to
        ``<name>.corrupt`` first, so the next save cannot overwrite it.
        """
        path = Path(path)
        try:
            tickets = _tickets_adapter.validate_json(path.read_bytes())
        except OSError as e:
            logger.error("Error loading tickets from %s: %s", path, e)
            tickets = []
        except ValidationError as e:
            logger.error("Error loading tickets from %s: %s", path, e)
            _quarantine(path)
            tickets = []
        return cls(path, directory, tickets)

    @property
    def tickets(self) -> list[Ticket]:
        return list(self._tickets)

    def __len__(self) -> int:
        return len(self._tickets)

    def next_log_id(self) -> int:
        if not self._tickets:
            return 1
        return max(t.logId for t in self._tickets) + 1

    def append_ticket(
        self,
        patient_id: str,
        raw_request: str,
        request_summary: str,
        assigned_department: str,
        priority: str,
    ) -> Ticket:
        """
        Create a ticket for ``patient_id`` and persist the whole ledger.

        Raises PatientNotFoundError before touching any state if the patient
        is unknown. If the write fails the new ticket is removed again and
        LedgerPersistenceError is raised, so memory and disk stay in step.
        """
        placement = self.directory.lookup(patient_id)
        now = format_timestamp(datetime.now(timezone.utc))

        ticket = Ticket(
            logId=self.next_log_id(),
            patient_id=patient_id,
            room=placement.room,
            requestSummary=request_summary,
            rawRequest=raw_request,
            status="open",
            assignedDepartment=assigned_department,
            assignedNurseID=placement.nurse,
            priority=priority,
            created_at=now,
            updated_at=now,
        )

        self._tickets.append(ticket)
        try:
            self.save()
        except LedgerPersistenceError:
            self._tickets.pop()
            raise

        logger.info("Logged ticket %d for patient %s (room %s)", ticket.logId, patient_id, ticket.room)
        return ticket

    # Name used by the logRequest tool.
    log_request = append_ticket

    def save(self) -> None:
        """Overwrite the ledger file with the full in-memory collection."""
        temp_file = self.path.with_suffix(".tmp")
        try:
            document = json.dumps([t.model_dump() for t in self._tickets], indent=4, ensure_ascii=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(document)
            if self.path.is_file():
                shutil.copymode(self.path, temp_file)
            temp_file.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving tickets to %s: %s", self.path, e)
            temp_file.unlink(missing_ok=True)
            raise LedgerPersistenceError(f"Failed to save tickets: {e}") from e
