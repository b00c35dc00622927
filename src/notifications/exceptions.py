class EmailProviderError(Exception):
    """The email provider refused the message or could not be reached."""


class EmailNotConfiguredError(EmailProviderError):
    """Neither SMTP nor Mailgun credentials are configured."""
