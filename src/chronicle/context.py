# SPDX-License-Identifier: MIT

import logging
from typing import Optional

import httpx

from chronicle import configuration
from chronicle.migrate import migrate
from chronicle.remote.client import RemoteClient
from chronicle.repository.configuration import ConfigurationRepository
from chronicle.repository.divergence import DivergenceRepository
from chronicle.repository.entry import LocalEntryStore
from chronicle.repository.id_map import IdMapRepository
from chronicle.repository.key_value import KeyValueRepository
from chronicle.repository.migrate import MigrateRepository
from chronicle.repository.session import SessionRepository
from chronicle.service.auth import AuthService
from chronicle.service.entries import EntriesManager
from chronicle.service.quick_log import QuickLogCatalog
from chronicle.service.settings import SettingsService
from chronicle.service.storage import EntryStorage, select_storage

logger = logging.getLogger(__name__)


class AppContext:
    """
    Everything one run of the application works with. Built once at startup
    and handed to the parts that need it.
    """

    def __init__(
        self,
        config_repo: ConfigurationRepository,
        migrate_repo: MigrateRepository,
        local_store: LocalEntryStore,
        key_value: KeyValueRepository,
        id_map: IdMapRepository,
        ledger: DivergenceRepository,
        remote_client: Optional[RemoteClient],
        auth: AuthService,
        storage: EntryStorage,
        entries: EntriesManager,
        quick_log: QuickLogCatalog,
        settings: SettingsService,
    ) -> None:
        self.config_repo = config_repo
        self.migrate_repo = migrate_repo
        self.local_store = local_store
        self.key_value = key_value
        self.id_map = id_map
        self.ledger = ledger
        self.remote_client = remote_client
        self.auth = auth
        self.storage = storage
        self.entries = entries
        self.quick_log = quick_log
        self.settings = settings

    @property
    def is_remote_mode(self) -> bool:
        return self.remote_client is not None

    def flush(self) -> None:
        self.config_repo.flush()
        self.id_map.flush()
        self.migrate_repo.flush()
        self.local_store.flush()
        self.key_value.flush()
        self.ledger.flush()

    def close(self) -> None:
        self.flush()
        if self.remote_client is not None:
            self.remote_client.close()


def build_context(
    config_repo: ConfigurationRepository,
    http_client: Optional[httpx.Client] = None,
) -> AppContext:
    """
    Build the application context in startup order: store migrations, remote
    client, session restore, storage selection, then the quick-log catalog and
    settings.
    """
    config = config_repo.get_config()

    migrate_repo = MigrateRepository(configuration.DATA_MIGRATE_PATH)
    applied = migrate.run_required_migrations(migrate_repo)
    if applied:
        logger.info("applied store migrations %s", applied)

    local_store = LocalEntryStore(
        configuration.DATA_ENTRIES_DIR, configuration.DATA_STORE_META_PATH
    )
    local_store.open()

    remote_client: Optional[RemoteClient] = None
    credentials = configuration.resolve_remote_credentials(config)
    if credentials is None:
        logger.info("remote service not configured, running in local-only mode")
    else:
        remote_client = RemoteClient(
            credentials["url"], credentials["anon_key"], http_client=http_client
        )

    auth = AuthService(
        remote_client,
        SessionRepository(configuration.DATA_SESSION_PATH),
        config.get("magic_link_redirect"),
    )
    user = auth.init()
    if user is not None:
        logger.info("authenticated as %s", user["email"])
    elif remote_client is not None:
        logger.info("running in local mode (not authenticated)")

    ledger = DivergenceRepository(configuration.DATA_DIVERGENCE_PATH)
    storage = select_storage(remote_client, local_store, auth, ledger)

    key_value = KeyValueRepository(configuration.DATA_KEY_VALUE_PATH)
    quick_log = QuickLogCatalog(key_value)
    quick_log.load()

    settings = SettingsService(key_value, storage)
    settings.load()

    return AppContext(
        config_repo=config_repo,
        migrate_repo=migrate_repo,
        local_store=local_store,
        key_value=key_value,
        id_map=IdMapRepository(configuration.DATA_ID_MAP_PATH),
        ledger=ledger,
        remote_client=remote_client,
        auth=auth,
        storage=storage,
        entries=EntriesManager(storage),
        quick_log=quick_log,
        settings=settings,
    )
