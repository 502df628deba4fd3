"""SQLAlchemy models.

All models should be imported here for Alembic to detect them.
"""

from linkfolio.core.database import Base
from linkfolio.models.profile import Profile
from linkfolio.models.link import Link

__all__ = ["Base", "Profile", "Link"]
