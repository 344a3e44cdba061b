from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _agora() -> datetime:
    return datetime.now(timezone.utc)


class UserInfo(Base):
    __tablename__ = "user_info"

    id = Column(String, primary_key=True, index=True)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    education_level = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_agora, onupdate=_agora)


class QuizResult(Base):
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    quiz_name = Column(String, nullable=False)
    score = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    time_spent = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_agora, index=True)


class Essay(Base):
    __tablename__ = "essays"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    word_count = Column(Integer, nullable=False, default=0)
    time_spent = Column(Integer, nullable=False, default=0)
    score = Column(Integer, nullable=True)
    status = Column(String, default="submitted")
    resultado_json = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_agora, index=True)


def criar_engine(database_url: Optional[str]) -> Engine:
    if not database_url:
        raise ValueError("A variável de ambiente DATABASE_URL não está configurada!")

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url)


def criar_sessao_factory(engine: Engine) -> sessionmaker:
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
