"""Reconciliation of collected tags against a response's cache tags.

The policy runs once per top-level response, after every record load for
the request has finished and before the body is sent:

1. mode check (disabled, or a reporter that ignores leaks)
2. request kind (sub-requests and XHR fragments are skipped)
3. nothing collected
4. response carries no cache metadata
5. skipped path, admin route or admin theme
6. the settings page itself
7. listing tag suppression
8. diff against the response tags
9. dispatch to the reporter

Steps 1-6 are plain early returns.
"""

import logging
from typing import cast

from tagleak.catalog import ListingCatalogSource, StaticListingCatalog
from tagleak.reporters import LeakReporter, SilentReporter, create_reporter
from tagleak.settings import LeakSettings, OperationMode
from tagleak.suppression import suppress_listed
from tagleak.types import (
    CacheableResponse,
    CollectedTagSet,
    LeakSet,
    RequestContext,
)

logger = logging.getLogger(__name__)


class ReconciliationPolicy:
    """Decides whether to check a response and reports what leaked."""

    def __init__(
        self,
        settings: LeakSettings,
        reporter: LeakReporter,
        catalog: ListingCatalogSource,
    ) -> None:
        self._settings = settings
        self._reporter = reporter
        self._catalog = catalog

    @property
    def settings(self) -> LeakSettings:
        return self._settings

    @property
    def reporter(self) -> LeakReporter:
        return self._reporter

    def reconcile(
        self,
        collected: CollectedTagSet,
        response: object,
        context: RequestContext,
    ) -> LeakSet:
        """Check a response and report leaks.

        Returns the leaked tags that were handed to the reporter, or an
        empty tuple when the check was skipped or nothing leaked.
        """
        skip_reason = self._skip_reason(collected, response, context)
        if skip_reason is not None:
            logger.debug("Skipping cache tag check for %s: %s", context.path, skip_reason)
            return ()

        response = cast(CacheableResponse, response)
        response_tags = frozenset(response.get_cache_tags())
        suppressed = suppress_listed(
            collected, response_tags, self._catalog.get_listing_tags()
        )
        leaks = suppressed.difference(response_tags)
        if not leaks:
            return ()

        logger.warning(
            "Cache tags missing from response for %s: %s",
            context.path,
            ", ".join(leaks),
        )
        self._reporter.report(leaks, response)
        return leaks

    def _skip_reason(
        self,
        collected: CollectedTagSet,
        response: object,
        context: RequestContext,
    ) -> str | None:
        if self._settings.operation_mode is OperationMode.DISABLED or isinstance(
            self._reporter, SilentReporter
        ):
            return "disabled"
        if context.is_subrequest or context.is_xhr:
            return "not a main request"
        if not collected:
            return "no tracked records"
        if not isinstance(response, CacheableResponse):
            return "response is not cacheable"
        if self._settings.is_skipped_url(context.path):
            return "path is skipped"
        if self._settings.skip_admin and (
            context.is_admin_route or context.uses_admin_theme
        ):
            return "admin page"
        # Never check the settings page, so strict mode can always be turned off.
        if context.route_name == self._settings.settings_route:
            return "settings page"
        return None


def create_policy(
    settings: LeakSettings | None = None,
    *,
    catalog: ListingCatalogSource | None = None,
    reporter: LeakReporter | None = None,
) -> ReconciliationPolicy:
    """Create a reconciliation policy.

    Args:
        settings: Leak detection settings (default: read from the environment)
        catalog: Listing tag catalog (default: empty)
        reporter: Reporter override (default: chosen from the operation mode)

    Returns:
        ReconciliationPolicy ready to reconcile responses
    """
    settings = settings if settings is not None else LeakSettings()
    return ReconciliationPolicy(
        settings=settings,
        reporter=reporter if reporter is not None else create_reporter(settings.operation_mode),
        catalog=catalog if catalog is not None else StaticListingCatalog(),
    )


__all__ = ["ReconciliationPolicy", "create_policy"]
