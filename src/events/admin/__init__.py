"""Events admin module.

Django autodiscover imports this package, which registers the admin classes of the
submodules through their @admin.register decorators.
"""

from events.admin.event import (
    EventAdmin,
    EventPageVersionAdmin,
    InvitationConfigAdmin,
    InviteAdmin,
    MediaAssetAdmin,
    PageTemplateAdmin,
    RSVPAdmin,
)
from events.admin.organization import OrganizationAdmin, OrganizationMemberAdmin

__all__ = [
    "EventAdmin",
    "EventPageVersionAdmin",
    "InvitationConfigAdmin",
    "InviteAdmin",
    "MediaAssetAdmin",
    "OrganizationAdmin",
    "OrganizationMemberAdmin",
    "PageTemplateAdmin",
    "RSVPAdmin",
]
