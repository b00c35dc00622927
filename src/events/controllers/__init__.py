from .dashboard import DashboardController
from .events import EventController
from .invitation_config import InvitationConfigController
from .invites import EventGuestsController
from .page import MediaController, PageConfigController, PreviewTokenController
from .public import PublicController, RSVPController

EVENT_CONTROLLERS = [
    EventController,
    EventGuestsController,
    PageConfigController,
    PreviewTokenController,
    MediaController,
    InvitationConfigController,
    DashboardController,
    RSVPController,
    PublicController,
]

__all__ = ["EVENT_CONTROLLERS"]
