"""
Caller role profiles.

A role changes what the pipeline asks of the caller and tells the model, not
the control flow: identity requirement, the access block of the system
instruction, prompt examples, the session id prefix and the access tag added
to responses.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptExample:
    question: str
    response: str
    note: str | None = None


@dataclass(frozen=True)
class RoleProfile:
    """Configuration for one chat endpoint."""

    name: str
    session_prefix: str = "chat_"
    requires_identity: bool = False
    full_access: bool = False
    access_level: str | None = None
    policy_lookup: bool = True
    examples: tuple[PromptExample, ...] = ()


_COUNT_ACTIVE = PromptExample(
    question="How many employees?",
    response=(
        '{"sql":"SELECT COUNT(*) as total_employees FROM dice_staff '
        "WHERE staff_status='active'\"}"
    ),
)

_LIST_THEM = PromptExample(
    question="List them",
    note="referring to previous query",
    response=(
        '{"sql":"SELECT staff_first_name, staff_last_name, staff_designation FROM dice_staff '
        "WHERE staff_status='active' ORDER BY staff_first_name\"}"
    ),
)

_STAFF_DETAILS = PromptExample(
    question="Show Aamir Khan's details",
    response=(
        '{"sql":"SELECT ds.*, dsd.staff_department_name FROM dice_staff ds '
        "LEFT JOIN dice_staff_department dsd ON ds.staff_department = dsd.staff_department_id "
        "WHERE ds.staff_first_name='Aamir' AND ds.staff_last_name='Khan'\"}"
    ),
)

_LEAVE_POLICY_TEXT = PromptExample(
    question="What's the leave policy?",
    response='"The standard leave policy typically includes 20 days of annual leave..."',
)

_LEAVE_RECORDS = PromptExample(
    question="Show Aamir's leave records",
    response=(
        '{"sql":"SELECT dsl.*, ds.staff_first_name, ds.staff_last_name FROM dice_staff_leave dsl '
        "LEFT JOIN dice_staff ds ON dsl.staff_id = ds.staff_id "
        "WHERE ds.staff_first_name='Aamir' ORDER BY dsl.staff_leave_start_date DESC\"}"
    ),
)

_ATTENDANCE_SUMMARY = PromptExample(
    question="Department wise attendance summary",
    response=(
        '{"sql":"SELECT dsd.staff_department_name, COUNT(dsa.id) as attendance_count, '
        "COUNT(DISTINCT dsa.staff_id) as unique_staff FROM dice_staff_attendance dsa "
        "LEFT JOIN dice_staff ds ON dsa.staff_id = ds.staff_id "
        "LEFT JOIN dice_staff_department dsd ON ds.staff_department = dsd.staff_department_id "
        'GROUP BY dsd.staff_department_name ORDER BY attendance_count DESC"}'
    ),
)

_PENDING_LEAVE = PromptExample(
    question="All pending leave requests",
    response=(
        '{"sql":"SELECT dsl.*, ds.staff_first_name, ds.staff_last_name, ds.staff_email '
        "FROM dice_staff_leave dsl LEFT JOIN dice_staff ds ON dsl.staff_id = ds.staff_id "
        "WHERE dsl.staff_leave_status = 'pending' ORDER BY dsl.created_at DESC\"}"
    ),
)


STANDARD = RoleProfile(
    name="standard",
    examples=(_COUNT_ACTIVE, _LIST_THEM, _STAFF_DETAILS, _LEAVE_POLICY_TEXT),
)

MANAGER = RoleProfile(
    name="manager",
    examples=(_COUNT_ACTIVE, _LIST_THEM, _STAFF_DETAILS),
)

HR = RoleProfile(
    name="hr",
    session_prefix="chat_hr_",
    requires_identity=True,
    full_access=True,
    access_level="hr",
    examples=(_COUNT_ACTIVE, _LEAVE_RECORDS, _ATTENDANCE_SUMMARY, _PENDING_LEAVE),
)

ROLES: dict[str, RoleProfile] = {role.name: role for role in (STANDARD, MANAGER, HR)}


def get_role(name: str) -> RoleProfile:
    """Look up a role profile by name."""
    try:
        return ROLES[name]
    except KeyError:
        raise ValueError(f"Unknown role: {name}. Available roles: {sorted(ROLES)}") from None
