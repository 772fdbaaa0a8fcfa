"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur SQL, factory de sessions, moteur de
transitions) et expose un singleton `container` utilisé par le reste de l'application.
"""

from shelter.core.settings import get_settings
from shelter.domain.statuses import StatusTransitionEngine
from shelter.infra.repo.db import MEMORY_URL, get_engine, get_session_factory
from shelter.infra.repo.models import Base


class Container:
    def __init__(self):
        self.settings = get_settings()
        url = self.settings.DATABASE_URL or MEMORY_URL
        self.engine = get_engine(url)
        self.session_factory = get_session_factory(self.engine)
        # SQLite (dev/tests): schéma créé à la volée; ailleurs, via Alembic.
        if url.startswith("sqlite"):
            Base.metadata.create_all(self.engine)
            self.storage_backend = "sqlite"
        else:
            self.storage_backend = self.engine.dialect.name
        self.status_engine = StatusTransitionEngine(strict=self.settings.STRICT_STATUS_VALUES)


container = Container()
