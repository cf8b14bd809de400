# /app/db/base_class.py

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """
    Declarative base for every ORM model.
    Table names default to the pluralised, lower-cased class name
    (e.g. `Submission` -> `submissions`) unless a model sets its own.
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"
