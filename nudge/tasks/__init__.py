"""
tasks package: the weekly run and its stages.
"""
from .delivery import (
    DeliveryOutcome,
    DiagnosticOutcome,
    RunReport,
    deliver_to_group,
    deliver_weekly_updates,
    send_admin_summary,
)
from .admin_report import format_admin_summary
from .health import probe_calendar, probe_messaging, run_preflight_checks
from .weekly_update import run_weekly_update

__all__ = [
    'DeliveryOutcome', 'DiagnosticOutcome', 'RunReport',
    'deliver_to_group', 'deliver_weekly_updates', 'send_admin_summary',
    'format_admin_summary',
    'probe_calendar', 'probe_messaging', 'run_preflight_checks',
    'run_weekly_update',
]
