"""Domain composition root for the storefront."""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

# Catalogue, ordering and payments share one domain so that a checkout can
# touch Product and Order aggregates inside a single unit of work.
storefront = Domain(name="storefront")
