# db/base.py

from sqlalchemy.orm import DeclarativeBase


# Define the common base class for all models
class Base(DeclarativeBase):
    pass
