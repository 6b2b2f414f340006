"""
API Services Layer.

Workflow operations for the recruitment pipeline. Every function receives the
entity store (and, for mutations, the audit recorder) explicitly.
"""

from api.services.audit import (
    AuditRecorder,
    StoreAuditRecorder,
    list_audit_logs,
)

from api.services.candidates import (
    CandidateDetails,
    submit_application,
    transition_candidate,
    get_candidate,
    list_candidates,
    get_candidate_details,
)

from api.services.interviews import (
    SessionDetails,
    SessionProgress,
    compute_progress,
    create_session,
    get_progress,
    get_session_details,
    list_sessions,
    list_assigned_interviews,
    record_evaluation,
    start_session,
    close_session,
    cancel_session,
)

from api.services.decisions import (
    record_decision,
    list_decisions,
)

from api.services.users import (
    ProvisionedUser,
    create_user,
    get_user,
    list_users,
    update_user,
    set_user_status,
)

from api.services.positions import (
    create_position,
    update_position,
    list_open_positions,
    list_positions,
)

from api.services.employees import (
    create_employee,
    update_employee,
    get_employee_by_user,
    list_employees,
)

from api.services.statistics import (
    PipelineStatistics,
    get_statistics,
)

__all__ = [
    # Audit
    "AuditRecorder",
    "StoreAuditRecorder",
    "list_audit_logs",
    # Candidates
    "CandidateDetails",
    "submit_application",
    "transition_candidate",
    "get_candidate",
    "list_candidates",
    "get_candidate_details",
    # Interviews
    "SessionDetails",
    "SessionProgress",
    "compute_progress",
    "create_session",
    "get_progress",
    "get_session_details",
    "list_sessions",
    "list_assigned_interviews",
    "record_evaluation",
    "start_session",
    "close_session",
    "cancel_session",
    # Decisions
    "record_decision",
    "list_decisions",
    # Users
    "ProvisionedUser",
    "create_user",
    "get_user",
    "list_users",
    "update_user",
    "set_user_status",
    # Positions
    "create_position",
    "update_position",
    "list_open_positions",
    "list_positions",
    # Employees
    "create_employee",
    "update_employee",
    "get_employee_by_user",
    "list_employees",
    # Statistics
    "PipelineStatistics",
    "get_statistics",
]
