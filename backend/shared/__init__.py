"""
Shared module for common utilities used by the options API.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging with request correlation
  - constants.py: Limits, id strategies, change actions

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy engine, sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and log filter

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Text and pattern validation
  - schemas.py: Response envelope schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import IdStrategy, Limits
    from shared.utils.exceptions import NotFoundError, AlreadyExistsError
"""
