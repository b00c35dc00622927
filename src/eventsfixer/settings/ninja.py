from datetime import timedelta

from decouple import config

VERIFY_TOKEN_LIFETIME = timedelta(hours=config("VERIFY_TOKEN_LIFETIME_HOURS", default=24, cast=int))
