from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.sessao_factory()
    try:
        yield db
    finally:
        db.close()
