"""Events schema package."""

from .event import (
    DashboardStatsSchema,
    EventCreateSchema,
    EventDetailSchema,
    EventListItemSchema,
    EventListSchema,
    EventQuerySchema,
    EventSchema,
    EventUpdateSchema,
    PublishEventSchema,
)
from .invitation_config import InvitationConfigInputSchema, InvitationConfigSchema
from .invite import (
    BulkInviteCreatedSchema,
    InviteCreatedSchema,
    InviteCreateSchema,
    InviteExportQuerySchema,
    InviteItemSchema,
    InviteListSchema,
    InviteLookupQuerySchema,
    InviteLookupSchema,
    InviteQuerySchema,
    InviteSchema,
    RSVPListSchema,
    RSVPQuerySchema,
    RSVPResultSchema,
    RSVPSubmitSchema,
    SingleInviteCreatedSchema,
)
from .organization import MinimalOrganizationSchema
from .page import (
    MediaAssetSchema,
    MediaListSchema,
    MediaUploadResultSchema,
    PageActionSchema,
    PageConfigSchema,
    PageConfigUpdatedSchema,
    PageConfigUpdateSchema,
    PagePublishStateSchema,
    PageTemplateSchema,
    PageVersionDetailSchema,
    PageVersionListSchema,
    PreviewPageSchema,
    PreviewTokenRevokedSchema,
    PreviewTokenSchema,
    PreviewTokenStatusSchema,
    RollbackResultSchema,
)
from .page_config import EventPageConfigV1

__all__ = [
    "BulkInviteCreatedSchema",
    "DashboardStatsSchema",
    "EventCreateSchema",
    "EventDetailSchema",
    "EventListItemSchema",
    "EventListSchema",
    "EventPageConfigV1",
    "EventQuerySchema",
    "EventSchema",
    "EventUpdateSchema",
    "InvitationConfigInputSchema",
    "InvitationConfigSchema",
    "InviteCreatedSchema",
    "InviteCreateSchema",
    "InviteExportQuerySchema",
    "InviteItemSchema",
    "InviteListSchema",
    "InviteLookupQuerySchema",
    "InviteLookupSchema",
    "InviteQuerySchema",
    "InviteSchema",
    "MediaAssetSchema",
    "MediaListSchema",
    "MediaUploadResultSchema",
    "MinimalOrganizationSchema",
    "PageActionSchema",
    "PageConfigSchema",
    "PageConfigUpdatedSchema",
    "PageConfigUpdateSchema",
    "PagePublishStateSchema",
    "PageTemplateSchema",
    "PageVersionDetailSchema",
    "PageVersionListSchema",
    "PreviewPageSchema",
    "PreviewTokenRevokedSchema",
    "PreviewTokenSchema",
    "PreviewTokenStatusSchema",
    "PublishEventSchema",
    "RSVPListSchema",
    "RSVPQuerySchema",
    "RSVPResultSchema",
    "RSVPSubmitSchema",
    "RollbackResultSchema",
    "SingleInviteCreatedSchema",
]
