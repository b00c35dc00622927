"""Firebase ID token verification and local user synchronisation."""

import typing as t

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction
from google.auth import jwt as google_jwt
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from accounts.models import User
from common.exceptions import ConflictError

logger = structlog.get_logger(__name__)

FirebaseClaims = dict[str, t.Any]

_transport_request = google_requests.Request()


def verify_id_token(token: str) -> FirebaseClaims:
    """Verify a Firebase ID token and return its claims.

    Against the Auth emulator tokens are unsigned, so they are decoded without a
    signature check. Otherwise the signature is checked against Google's public
    certificates, the audience against ``FIREBASE_PROJECT_ID`` and the issuer against
    the project's secure token issuer.

    Raises:
        ValueError: if the token is malformed, expired, or issued for another project.
    """
    project_id = settings.FIREBASE_PROJECT_ID
    if settings.FIREBASE_AUTH_EMULATOR_HOST:
        claims = t.cast(FirebaseClaims, google_jwt.decode(token, verify=False))
    else:
        claims = t.cast(
            FirebaseClaims,
            id_token.verify_firebase_token(token, _transport_request, audience=project_id),
        )
        expected_issuer = f"https://securetoken.google.com/{project_id}"
        if claims.get("iss") != expected_issuer:
            raise ValueError("Wrong issuer.")

    uid = claims.get("user_id") or claims.get("sub")
    if not uid:
        raise ValueError("Token has no subject.")
    if not claims.get("email"):
        raise ValueError("Token has no email claim.")
    claims["uid"] = uid
    return claims


@transaction.atomic
def sync_user(claims: FirebaseClaims) -> User:
    """Return the local user for a verified token, creating or refreshing it.

    Users are matched by Firebase uid first. A user that signed up before Firebase
    was linked is matched by email and gets the uid attached. Anyone else is created.

    Raises:
        ConflictError: the token's email now belongs to another local user.
    """
    uid = claims["uid"]
    email = claims["email"].lower()
    name = claims.get("name") or ""
    avatar_url = claims.get("picture") or ""

    if user := User.objects.filter(firebase_uid=uid).first():
        user.email = email
        user.name = name
        user.avatar_url = avatar_url
        try:
            with transaction.atomic():
                user.save(update_fields=["email", "name", "avatar_url", "updated_at"])
        except IntegrityError as e:
            logger.warning("firebase_email_taken", user_id=str(user.id))
            raise ConflictError("This email address is already used by another account") from e
        return user

    if user := User.objects.filter(email=email).first():
        user.firebase_uid = uid
        user.name = name
        user.avatar_url = avatar_url
        user.save(update_fields=["firebase_uid", "name", "avatar_url", "updated_at"])
        logger.info("firebase_uid_linked", user_id=str(user.id))
        return user

    user = User.objects.create_user(
        username=uid,
        email=email,
        firebase_uid=uid,
        name=name,
        avatar_url=avatar_url,
    )
    logger.info("user_created_from_firebase", user_id=str(user.id))
    return user
