from sqlalchemy import BigInteger, Column, String
from shorturl_app.database.connection import Base


class Counter(Base):
    """
    Named sequence counter holding the last issued value.

    Rows are created lazily by the first allocation and only ever incremented.
    """
    __tablename__ = "counters"

    name = Column(String, primary_key=True)
    value = Column(BigInteger, nullable=False, default=0)

    def __repr__(self):
        return f"<Counter {self.name}: {self.value}>"
