"""Schema helpers for SQL-backed providers.

The in-memory provider needs no schema; these are no-ops unless a provider
is configured with a sqlite or postgresql database URI.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity persisted by a SQL provider."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
            for record in records:
                if record.cls.meta_.provider == provider.name:
                    # Building the DAO registers the table on the provider's metadata
                    domain.repository_for(record.cls)._dao  # noqa: B018

            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
