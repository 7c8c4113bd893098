from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models import Base from this module; gigzz.db.models registers all of them
