"""Composition root for the three role sessions of one client process."""

from typing import Iterable, Optional
import logging

import httpx

from ..core.config import settings
from .caches import AdminDataCache, DoctorDataCache, PatientDataCache
from .credentials import (
    CredentialStore, LocalStorage,
    ADMIN_TOKEN_KEY, DOCTOR_TOKEN_KEY, PATIENT_TOKEN_KEY
)
from .gateway import ApiGatewayClient, Middleware
from .middleware import LoadingTracker, RequestLogger
from .notifications import NotificationSink, LoggingNotificationSink

logger = logging.getLogger(__name__)

# Credential header each role's gate reads first
ADMIN_TOKEN_HEADER = "atoken"
DOCTOR_TOKEN_HEADER = "dtoken"
PATIENT_TOKEN_HEADER = "token"


class ClientSessions:
    """Builds independent admin, doctor and patient sessions.

    The sessions share the backend address, the notification sink, the
    loading tracker and the storage file, each credential under its own
    key. They share no cached data.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        sink: Optional[NotificationSink] = None,
        storage: Optional[LocalStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        middlewares: Iterable[Middleware] = (),
    ):
        self.base_url = base_url or settings.BACKEND_URL
        self.sink = sink or LoggingNotificationSink()
        self.storage = storage or LocalStorage(settings.CREDENTIAL_STORE_PATH)
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self.loading = LoadingTracker()
        self.middlewares = (self.loading, RequestLogger(), *middlewares)

        self.admin = AdminDataCache(
            self._gateway(ADMIN_TOKEN_HEADER),
            CredentialStore(self.storage, ADMIN_TOKEN_KEY),
        )
        self.doctor = DoctorDataCache(
            self._gateway(DOCTOR_TOKEN_HEADER),
            CredentialStore(self.storage, DOCTOR_TOKEN_KEY),
        )
        self.patient = PatientDataCache(
            self._gateway(PATIENT_TOKEN_HEADER),
            CredentialStore(self.storage, PATIENT_TOKEN_KEY),
        )
        logger.info(f"Client sessions bound to {self.base_url}")

    def _gateway(self, token_header: str) -> ApiGatewayClient:
        return ApiGatewayClient(
            self.base_url,
            token_header,
            self.sink,
            middlewares=self.middlewares,
            timeout=self.timeout,
            transport=self.transport,
        )

    @property
    def is_loading(self) -> bool:
        return self.loading.is_loading
