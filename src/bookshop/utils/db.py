"""Schema management for SQL-backed providers.

Protean builds SQLAlchemy table metadata lazily, when a repository's DAO is
first touched. Both helpers force that for every aggregate and entity bound to
a SQL provider before handing the metadata to SQLAlchemy.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def _materialize_tables(domain: Domain, provider) -> None:
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018

    # Outbox tables are registered as internal repositories
    if hasattr(domain, "_outbox_repos") and provider.name in domain._outbox_repos:
        domain._outbox_repos[provider.name]._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every SQL provider of ``domain``."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _materialize_tables(domain, provider)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.create_all(engine)
            logger.info("Schema created", provider=provider.name)


def drop_db(domain: Domain) -> None:
    """Drop tables for every SQL provider of ``domain``."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _materialize_tables(domain, provider)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Schema dropped", provider=provider.name)
