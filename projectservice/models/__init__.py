# SQLModel definitions: imported here to ensure metadata is populated for Alembic.
from .base import UUIDMixin, CreatedAtMixin, TimestampMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .membership import Membership  # noqa: F401
from .invitation import Invitation  # noqa: F401
from .follower import Follower  # noqa: F401
