"""Django Unfold admin configuration."""

from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _

from .base import SITE_NAME, VERSION

UNFOLD = {
    "SITE_TITLE": f"{SITE_NAME} v{VERSION} Admin",
    "SITE_HEADER": f"{SITE_NAME} v{VERSION} Administration",
    "SITE_URL": "/",
    "SHOW_VIEW_ON_SITE": False,
    "COLORS": {
        "primary": {
            "50": "255 247 237",
            "100": "255 237 213",
            "200": "254 215 170",
            "300": "253 186 116",
            "400": "251 146 60",
            "500": "249 115 22",
            "600": "234 88 12",
            "700": "194 65 12",
            "800": "154 52 18",
            "900": "124 45 18",
            "950": "67 20 7",
        },
    },
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": _("Users"),
                "separator": False,
                "items": [
                    {
                        "title": _("Users"),
                        "icon": "person",
                        "link": reverse_lazy("admin:accounts_user_changelist"),
                    },
                ],
            },
            {
                "title": _("Organizations"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Organizations"),
                        "icon": "corporate_fare",
                        "link": reverse_lazy("admin:events_organization_changelist"),
                    },
                    {
                        "title": _("Members"),
                        "icon": "group",
                        "link": reverse_lazy("admin:events_organizationmember_changelist"),
                    },
                ],
            },
            {
                "title": _("Events"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Events"),
                        "icon": "event",
                        "link": reverse_lazy("admin:events_event_changelist"),
                    },
                    {
                        "title": _("Invites"),
                        "icon": "mail",
                        "link": reverse_lazy("admin:events_invite_changelist"),
                    },
                    {
                        "title": _("RSVPs"),
                        "icon": "how_to_reg",
                        "link": reverse_lazy("admin:events_rsvp_changelist"),
                    },
                    {
                        "title": _("Invitation Configs"),
                        "icon": "drafts",
                        "link": reverse_lazy("admin:events_invitationconfig_changelist"),
                    },
                ],
            },
            {
                "title": _("Event Pages"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Page Templates"),
                        "icon": "dashboard_customize",
                        "link": reverse_lazy("admin:events_pagetemplate_changelist"),
                    },
                    {
                        "title": _("Page Versions"),
                        "icon": "history",
                        "link": reverse_lazy("admin:events_eventpageversion_changelist"),
                    },
                    {
                        "title": _("Media"),
                        "icon": "image",
                        "link": reverse_lazy("admin:events_mediaasset_changelist"),
                    },
                ],
            },
            {
                "title": _("Email & Analytics"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Email Outbox"),
                        "icon": "outbox",
                        "link": reverse_lazy("admin:notifications_emailoutbox_changelist"),
                    },
                    {
                        "title": _("Analytics Events"),
                        "icon": "monitoring",
                        "link": reverse_lazy("admin:analytics_analyticsevent_changelist"),
                    },
                    {
                        "title": _("Periodic Tasks"),
                        "icon": "schedule",
                        "link": reverse_lazy("admin:django_celery_beat_periodictask_changelist"),
                    },
                ],
            },
        ],
    },
}
