"""Top-level Minimax client wiring auth, session, HTTP pipeline and services."""

from __future__ import annotations

import logging

from minimax.auth.oauth2 import OAuth2Client
from minimax.auth.session import SessionManager
from minimax.auth.token_store import TokenStore, build_token_store
from minimax.config import Config
from minimax.errors import AuthenticationError, MinimaxError
from minimax.http.client import HttpClient
from minimax.http.retry import RetryStrategy
from minimax.models.auth import Credentials, SessionState, Token
from minimax.services.customers import CustomerService
from minimax.services.employees import EmployeeService
from minimax.services.journal_types import JournalTypeService
from minimax.services.journals import JournalService
from minimax.services.organizations import OrganizationService
from minimax.services.received_invoices import ReceivedInvoiceService

logger = logging.getLogger(__name__)


class MinimaxClient:
    """Entry point for the Minimax API.

    Usage::

        async with MinimaxClient(get_config()) as client:
            await client.login()
            customers = await client.customers.list(name="Acme")
    """

    def __init__(
        self,
        config: Config,
        token_store: TokenStore | None = None,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        self._config = config
        settings = config.settings
        self.oauth2 = OAuth2Client(settings, token_store or build_token_store(config.token_store))
        self.session = SessionManager(settings, self.oauth2, config.refresh)
        self.http = HttpClient(settings, self.session, retry_strategy or config.retry)

        self.organizations = OrganizationService(self.http)
        self.customers = CustomerService(self.http)
        self.employees = EmployeeService(self.http)
        self.received_invoices = ReceivedInvoiceService(self.http)
        self.journals = JournalService(self.http)
        self.journal_types = JournalTypeService(self.http)

    @property
    def config(self) -> Config:
        return self._config

    async def __aenter__(self) -> MinimaxClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def login(self, credentials: Credentials | None = None) -> Token:
        """Log in and select the configured organization.

        Without ``credentials`` the configured username and password are used.
        """
        if credentials is None:
            settings = self._config.settings
            if not settings.username or not settings.password:
                raise AuthenticationError(
                    "No credentials given and MINIMAX_USERNAME / MINIMAX_PASSWORD are not set"
                )
            credentials = Credentials(
                username=settings.username,
                password=settings.password,
                scope=settings.scope,
            )

        token = await self.session.login(credentials)
        await self._select_configured_organization()
        return token

    async def _select_configured_organization(self) -> None:
        settings = self._config.settings
        identifier = settings.organization_identifier
        if not identifier:
            return

        # An organization already chosen, explicitly or by an earlier login, is kept.
        current = self.session.get_organization_id()
        if current and current != settings.default_org_id:
            logger.debug(f"Keeping selected organization {current}")
            return

        try:
            org = await self.organizations.find_by_identifier(identifier)
        except MinimaxError as e:
            logger.warning(f"Organization lookup failed: {e}")
            org = None

        if org is not None and org.resource_id is not None:
            self.session.set_organization_id(str(org.resource_id))
            logger.info(f"Selected organization {org.Name} ({org.resource_id})")
        elif settings.default_org_id:
            logger.warning(
                f"Organization '{identifier}' not found, using default {settings.default_org_id}"
            )
            self.session.set_organization_id(settings.default_org_id)
        else:
            logger.warning(f"Organization '{identifier}' not found")

    async def logout(self) -> None:
        await self.session.logout()

    async def get_session_state(self) -> SessionState:
        return await self.session.get_session_state()

    def set_organization_id(self, organization_id: str) -> None:
        self.session.set_organization_id(organization_id)

    def get_organization_id(self) -> str | None:
        return self.session.get_organization_id()

    async def close(self) -> None:
        """Close both HTTP connections (API and token endpoint)."""
        await self.http.close()
        await self.oauth2.close()
