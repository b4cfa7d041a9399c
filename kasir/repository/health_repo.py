from __future__ import annotations

from ..db import DB


class HealthRepository:
    def __init__(self, db: DB):
        self.db = db

    def ping(self) -> None:
        self.db.ping()
