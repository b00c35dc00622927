"""Controllers for the signed-in user's account and email verification."""

from ninja_extra import api_controller, route

from accounts import schema
from accounts.models import User
from accounts.service import verification
from common.authentication import FirebaseAuth
from common.controllers import UserAwareController
from common.schema import DataResponse
from common.throttling import AuthThrottle


@api_controller("/auth", auth=FirebaseAuth(), tags=["Auth"], throttle=AuthThrottle())
class AuthController(UserAwareController):
    @route.get("/me", url_name="me", response=DataResponse[schema.UserSchema])
    def me(self) -> dict[str, User]:
        """Return the profile of the signed-in user.

        The profile is refreshed from the Firebase token on every request, so name and avatar
        follow what the identity provider reports.
        """
        return {"data": self.user()}

    @route.post(
        "/resend-verification",
        url_name="resend-verification",
        response=DataResponse[schema.ResendVerificationResponseSchema],
    )
    def resend_verification(self) -> dict[str, schema.ResendVerificationResponseSchema]:
        """Send a new verification link to the signed-in user's email address.

        Users that are already verified get a success response with ``already_verified`` set.
        Only one link per minute is sent; asking sooner returns 429.
        """
        user = self.user()
        if user.email_verified:
            return {
                "data": schema.ResendVerificationResponseSchema(
                    message="Email is already verified", already_verified=True
                )
            }
        verification.resend_verification_email(user)
        return {"data": schema.ResendVerificationResponseSchema(message="Verification email sent")}

    @route.get(
        "/verification-status",
        url_name="verification-status",
        response=DataResponse[schema.VerificationStatusSchema],
    )
    def verification_status(self) -> dict[str, schema.VerificationStatusSchema]:
        """Tell whether the signed-in user's email address is verified."""
        user = self.user()
        return {"data": schema.VerificationStatusSchema(email_verified=user.email_verified, email=user.email)}

    @route.post(
        "/verify-email",
        url_name="verify-email",
        auth=None,
        response=DataResponse[schema.VerifyEmailResponseSchema],
    )
    def verify_email(self, payload: schema.VerifyEmailSchema) -> dict[str, schema.VerifyEmailResponseSchema]:
        """Confirm an email address with the token from the verification link.

        Does not require a signed-in user: the link is often opened on another device.
        """
        user = verification.verify_email(payload.token)
        return {"data": schema.VerifyEmailResponseSchema(message="Email verified successfully", email=user.email)}
