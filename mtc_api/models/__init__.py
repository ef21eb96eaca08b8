# SQLModel definitions: imported here to ensure metadata is populated.
from .base import IdMixin, CreatedAtMixin  # noqa: F401
from .user import User  # noqa: F401
from .project import Project  # noqa: F401
from .membership import Membership  # noqa: F401
