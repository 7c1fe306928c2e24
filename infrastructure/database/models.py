from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.types import TypeDecorator

from models.auto_enums import AutoKind

Base = declarative_base()


def utcnow() -> datetime:
    """Текущее время UTC без tzinfo (колонки DateTime хранят naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class KeywordList(TypeDecorator):
    """Список ключевых слов, хранится одной строкой через запятую."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return ",".join(value)

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return value.split(",")


class Auto(Base):
    __tablename__ = "auto"

    id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(Integer, nullable=False)
    vin = Column(String(17), nullable=False, unique=True)
    horsepower = Column(Integer, nullable=False, default=0)
    kind = Column(Enum(AutoKind, name="autokind"), nullable=True)
    price = Column(Numeric(8, 2), nullable=False)
    discount = Column(Numeric(4, 3), nullable=True)
    available = Column(Boolean, nullable=False, default=False)
    release_date = Column(Date, nullable=True)
    homepage = Column(String, nullable=True)
    keywords = Column(KeywordList, nullable=True)
    created = Column(DateTime, default=utcnow, nullable=False)
    updated = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Связи: всё, что принадлежит автомобилю, удаляется вместе с ним
    model = relationship(
        "AutoModel", back_populates="auto", uselist=False, cascade="all, delete-orphan"
    )
    images = relationship(
        "Image", back_populates="auto", cascade="all, delete-orphan", order_by="Image.id"
    )
    file = relationship(
        "AutoFile", back_populates="auto", uselist=False, cascade="all, delete-orphan"
    )

    # Оптимистическая блокировка: SQLAlchemy сам увеличивает version при UPDATE
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return (f"<Auto id={self.id}, version={self.version}, vin={self.vin}, "
                f"horsepower={self.horsepower}, kind={self.kind}, price={self.price}, "
                f"discount={self.discount}, available={self.available}, "
                f"release_date={self.release_date}, keywords={self.keywords}>")


class AutoModel(Base):
    __tablename__ = "auto_model"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(40), nullable=False)
    subtitle = Column(String(40), nullable=True)
    auto_id = Column(Integer, ForeignKey("auto.id", ondelete="CASCADE"), nullable=False, unique=True)

    auto = relationship("Auto", back_populates="model")

    def __repr__(self):
        return f"<AutoModel id={self.id}, name={self.name}, subtitle={self.subtitle}>"


class Image(Base):
    __tablename__ = "image"

    id = Column(Integer, primary_key=True, autoincrement=True)
    caption = Column(String(32), nullable=False)
    content_type = Column(String(16), nullable=True)
    auto_id = Column(Integer, ForeignKey("auto.id", ondelete="CASCADE"), nullable=False, index=True)

    auto = relationship("Auto", back_populates="images")

    def __repr__(self):
        return f"<Image id={self.id}, caption={self.caption}, content_type={self.content_type}>"


class AutoFile(Base):
    __tablename__ = "auto_file"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String, nullable=False)
    mimetype = Column(String, nullable=True)
    data = Column(LargeBinary, nullable=False)
    auto_id = Column(Integer, ForeignKey("auto.id", ondelete="CASCADE"), nullable=False, unique=True)

    auto = relationship("Auto", back_populates="file")

    def __repr__(self):
        return f"<AutoFile id={self.id}, filename={self.filename}, mimetype={self.mimetype}>"
