from sqlalchemy import Column, Integer, String, Text, BigInteger
from podhost.db.session import Base


class Podcast(Base):
    __tablename__ = "podcasts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Owning channel id; rows are removed explicitly when the channel goes away
    channel = Column(Integer, nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    published = Column(Integer, default=0)
    title = Column(Text, default="")
    length = Column(BigInteger, default=0)
    guid = Column(String(255), default="")
    pub_date = Column(String(64), default="")
    description = Column(Text, default="")
    duration = Column(Integer, default=0)
    artwork = Column(Text, default="")
    explicit = Column(Integer, default=0)
    season = Column(Integer, default=0)
    episode = Column(Integer, default=0)

    def __repr__(self):
        return f"<Podcast {self.id}: {self.filename}>"
