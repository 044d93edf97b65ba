from sqlalchemy import Column, Integer, String, Text
from podhost.db.session import Base


class Channel(Base):
    __tablename__ = "channels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alias = Column(String(255), unique=True, nullable=True)
    title = Column(Text, default="")
    description = Column(Text, default="")
    cover = Column(Text, default="")
    author = Column(Text, default="")

    def __repr__(self):
        return f"<Channel {self.id}: {self.alias}>"
