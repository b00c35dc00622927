from decouple import config

from .base import DEBUG, SITE_NAME

MAIL_FROM = config("MAIL_FROM", default=f"{SITE_NAME} <noreply@eventsfixer.com>")
DEFAULT_FROM_EMAIL = MAIL_FROM

MAILGUN_API_KEY = config("MAILGUN_API_KEY", default="")
MAILGUN_DOMAIN = config("MAILGUN_DOMAIN", default="")
MAILGUN_REGION_BASE_URL = config("MAILGUN_REGION_BASE_URL", default="https://api.mailgun.net")
MAILGUN_WEBHOOK_SIGNING_KEY = config("MAILGUN_WEBHOOK_SIGNING_KEY", default="")

EMAIL_HOST = config("SMTP_HOST", default="")
EMAIL_PORT = config("SMTP_PORT", default=587, cast=int)
EMAIL_HOST_USER = config("SMTP_USER", default="")
EMAIL_HOST_PASSWORD = config("SMTP_PASS", default="")
EMAIL_USE_TLS = config("SMTP_USE_TLS", default=EMAIL_PORT == 587, cast=bool)
EMAIL_USE_SSL = config("SMTP_USE_SSL", default=EMAIL_PORT == 465, cast=bool)

# Domain of the Message-ID header of emails sent over SMTP
EMAIL_MESSAGE_ID_DOMAIN = config("EMAIL_MESSAGE_ID_DOMAIN", default="eventsfixer.com")

# SMTP wins whenever a host is configured, otherwise Mailgun's HTTP API is used
EMAIL_PROVIDER = config("EMAIL_PROVIDER", default="smtp" if EMAIL_HOST else "mailgun")

EMAIL_DRY_RUN = config("EMAIL_DRY_RUN", default=False, cast=bool)

if EMAIL_DRY_RUN or (DEBUG and not EMAIL_HOST):
    EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
else:
    EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
