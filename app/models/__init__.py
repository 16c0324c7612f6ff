"""
Model package.

IMPORTANT (SQLModel):
- ``SQLModel.metadata`` is populated only when the table models are imported.
- ``app.db.engine.create_db_and_tables`` imports this package before calling
  ``create_all``, so this module must import all ``table=True`` models.
"""

# Import table models so SQLModel registers them in metadata.
from app.user.models import User  # noqa: F401
