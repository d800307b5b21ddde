from typing import Iterable, Optional

from dependency_injector import containers, providers

from record_store.db.context import Context
from record_store.db.services.record_service import RecordService
from record_store.utilities.config import Settings


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    context = providers.Singleton(Context)

    record_service = providers.Factory(
        RecordService,
        context=context,
        page_size=config.page_size,
    )


def create_container(settings: Optional[Settings] = None, modules: Optional[Iterable] = None) -> Container:
    """build the container, point the context at the configured database and wire modules

    Args:
        settings (Settings, optional): defaults to Settings.from_env()
        modules (Iterable, optional): modules using Provide[Container.*] markers
    """
    settings = settings or Settings.from_env()
    container = Container()
    container.config.from_dict(settings.as_dict())
    container.context().init_session(settings.database_uri)
    if modules:
        container.wire(modules=list(modules))
    return container
