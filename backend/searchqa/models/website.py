from datetime import datetime
from pgvector.sqlalchemy import Vector
from sqlalchemy import String, Text, DateTime, ForeignKey, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from searchqa.core.database import Base

EMBEDDING_DIMENSIONS = 1536


class Website(Base):
    __tablename__ = "Website"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    keywords: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    embeddings: Mapped[list["WebpageEmbedding"]] = relationship(
        "WebpageEmbedding", back_populates="website", cascade="all, delete-orphan"
    )


class WebpageEmbedding(Base):
    __tablename__ = "WebpageEmbedding"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    website_id: Mapped[int] = mapped_column(
        "websiteId", Integer, ForeignKey("Website.id"), nullable=False
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(
        Vector(EMBEDDING_DIMENSIONS), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        "createdAt", DateTime(timezone=True), default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    website: Mapped["Website"] = relationship("Website", back_populates="embeddings")


Index("WebpageEmbedding_websiteId_idx", WebpageEmbedding.website_id)
