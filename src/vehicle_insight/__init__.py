"""Vehicle Insight - vehicle hit notification ingestion.

This package searches a Gmail mailbox for vehicle hit notifications and
parses them into structured vehicle records and summary statistics.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from vehicle_insight.agent.assembler import compute_stats
from vehicle_insight.agent.notification_agent import NotificationAgent, fetch_notification_emails
from vehicle_insight.config import Settings, get_settings

__all__ = [
    "NotificationAgent",
    "Settings",
    "compute_stats",
    "fetch_notification_emails",
    "get_settings",
    "__version__",
    "__author__",
]
