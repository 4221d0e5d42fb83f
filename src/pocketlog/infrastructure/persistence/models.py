"""SQLModel table definitions."""

from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class RecordDocumentModel(SQLModel, table=True):
    """レコードドキュメントテーブル

    1 行に 1 レコードを JSON ドキュメントとして保持する。
    コレクション内の順序は position で表す。
    """

    __tablename__ = "record_documents"

    id: int | None = Field(default=None, primary_key=True)
    collection: str = Field(index=True)
    record_id: str
    position: int
    payload: str  # JSON format: {"id": "...", "created_at": "...", ...}
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("collection", "record_id", name="uq_collection_record"),
    )
