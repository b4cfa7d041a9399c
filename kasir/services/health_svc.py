from __future__ import annotations

import logging

from ..models import HealthCheck
from ..repository.health_repo import HealthRepository

logger = logging.getLogger(__name__)


class HealthService:
    def __init__(self, repository: HealthRepository):
        self.repository = repository

    def api(self) -> HealthCheck:
        return HealthCheck(name="Connection to Kasir API", is_healthy=True)

    def db(self) -> HealthCheck:
        name = "Connection to Kasir Database"
        try:
            self.repository.ping()
        except Exception as e:
            logger.warning("database ping failed: %s", e)
            return HealthCheck(name=name, is_healthy=False, error=str(e))
        return HealthCheck(name=name, is_healthy=True)
