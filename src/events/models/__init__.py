from .event import Event
from .invitation_config import InvitationConfig
from .invite import RSVP, Invite
from .organization import Organization, OrganizationMember
from .page import EventPageVersion, MediaAsset, PageTemplate

__all__ = [
    "Event",
    "EventPageVersion",
    "InvitationConfig",
    "Invite",
    "MediaAsset",
    "Organization",
    "OrganizationMember",
    "PageTemplate",
    "RSVP",
]
