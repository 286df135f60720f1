"""
schema.py — Pydantic models for the patient request tickets server
===================================================================
These are the domain objects that flow through the system.
Field names match the persisted JSON documents exactly, so a ticket
dumped with model_dump() can be written straight back to disk.
"""

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

Department = Literal["nursing", "hospitality", "maintenance", "medical", "other"]
Priority = Literal["low", "normal", "high", "urgent"]

DEPARTMENTS: tuple[str, ...] = get_args(Department)
PRIORITIES: tuple[str, ...] = get_args(Priority)


class PatientPlacement(BaseModel):
    """One entry of the patient directory: where the patient is and who attends them."""

    model_config = ConfigDict(frozen=True)

    room: str
    nurse: str


class Ticket(BaseModel):
    # Fields added to the stored file by hand are kept on rewrite.
    model_config = ConfigDict(extra="allow")

    logId: int
    patient_id: str
    room: str
    requestSummary: str
    rawRequest: str
    status: str = "open"
    # Departments and priorities are checked at the tool boundary, not here.
    assignedDepartment: str
    assignedNurseID: str
    priority: str
    created_at: str
    updated_at: str


class LogRequestArgs(BaseModel):
    """Arguments of the logRequest tool, as sent by the client."""

    patientID: str = Field(min_length=1)
    rawRequest: str = Field(min_length=1)
    requestSummary: str = Field(min_length=1)
    assignedDepartment: Department
    priority: Priority
