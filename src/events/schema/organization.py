from uuid import UUID

from ninja import Schema


class MinimalOrganizationSchema(Schema):
    id: UUID
    name: str
    slug: str
    logo_url: str | None = None
