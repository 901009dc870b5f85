from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeMeta

# Stable names for indexes and keys so Alembic batch migrations can find them on SQLite
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Single SQLAlchemy instance shared by the app
db = SQLAlchemy(metadata=MetaData(naming_convention=NAMING_CONVENTION))

Model: DeclarativeMeta = db.Model
metadata = db.metadata
