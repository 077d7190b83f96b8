"""Application UI layer: wizard state machine, progress tracking and page controllers."""

from client.api_client import ApiError, FitRoomClient
from client.notifications import ClientValidationError, Toast, ToastQueue
from client.pages import DashboardPage, WardrobePage, landing_content
from client.progress import ProgressTracker
from client.wizard import FitWizard, WizardStep

__all__ = [
    "ApiError",
    "ClientValidationError",
    "DashboardPage",
    "FitRoomClient",
    "FitWizard",
    "ProgressTracker",
    "Toast",
    "ToastQueue",
    "WardrobePage",
    "WizardStep",
    "landing_content",
]
