"""RepoTalk data access.

Usage:
    from repotalk_db import Database, update_vapi_call_status, VapiCallStatus

    db = Database.from_settings()
    async with db.session() as session:
        await update_vapi_call_status(session, "call_123", VapiCallStatus.COMPLETED)
    await db.dispose()
"""

from repotalk_db.database import *  # noqa: F401,F403
from repotalk_db.database import __all__ as _database_all
from repotalk_db.schemas import LanguageCount, SimilarCode, SimilarCodeOptions, VapiCallMetadata

__version__ = "0.1.0"

__all__ = [
    *_database_all,
    "VapiCallMetadata",
    "SimilarCodeOptions",
    "SimilarCode",
    "LanguageCount",
]
