"""Per-role snapshots of server collections and the operations that refresh them.

Every refresh issues one gateway call with the role's current credential.
A successful response replaces the cached value wholesale; a failure
leaves it untouched, the gateway having already notified the user.
"""

from functools import partial
from typing import Any, Dict, List, Optional
import logging

from .coordinator import MutationCoordinator
from .credentials import CredentialStore
from .errors import ApiResult
from .gateway import ApiGatewayClient

logger = logging.getLogger(__name__)


class _NotLoaded:
    """Marker for a profile that has never been fetched."""

    __slots__ = ()

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_LOADED"


NOT_LOADED = _NotLoaded()


class RoleDataCache:
    """State and operations shared by every role's session."""

    role = ""
    login_path = ""

    def __init__(
        self,
        gateway: ApiGatewayClient,
        credentials: CredentialStore,
        coordinator: Optional[MutationCoordinator] = None,
    ):
        self.gateway = gateway
        self.credentials = credentials
        self.coordinator = coordinator or MutationCoordinator()

    @property
    def is_authenticated(self) -> bool:
        return self.credentials.is_authenticated

    async def _call(
        self,
        method: str,
        path: str,
        action: str,
        body: Optional[Dict[str, Any]] = None,
        *,
        expect: Optional[str] = None,
        rejected: Optional[str] = None,
        announce: bool = False,
    ) -> ApiResult:
        return await self.gateway.request(
            method,
            path,
            body,
            self.credentials.get(),
            action=action,
            expect=expect,
            rejected=rejected,
            announce=announce,
        )

    async def login(self, email: str, password: str) -> ApiResult:
        """Exchange account details for a credential and persist it."""
        result = await self._call(
            "POST", self.login_path, "logging in",
            {"email": email, "password": password},
            expect="token",
        )
        if result.ok:
            self.credentials.set(result.payload["token"])
            logger.info(f"{self.role} session started")
        return result

    def logout(self) -> None:
        """Invalidate the credential. Calls already in flight still land."""
        self.credentials.clear()
        self._reset_profile()
        logger.info(f"{self.role} session ended")

    def _reset_profile(self) -> None:
        pass


class AdminDataCache(RoleDataCache):
    role = "admin"
    login_path = "/api/admin/login"

    def __init__(self, gateway, credentials, coordinator=None):
        super().__init__(gateway, credentials, coordinator)
        self.doctors: List[dict] = []
        self.appointments: List[dict] = []
        self.dash_data: Dict[str, Any] = {}

    async def refresh_doctors(self) -> ApiResult:
        result = await self._call("GET", "/api/admin/all-doctors", "fetching doctors", expect="doctors")
        if result.ok:
            self.doctors = result.payload["doctors"]
        return result

    async def refresh_appointments(self) -> ApiResult:
        result = await self._call("GET", "/api/admin/appointments", "fetching appointments", expect="appointments")
        if result.ok:
            self.appointments = result.payload["appointments"]
        return result

    async def refresh_dashboard(self) -> ApiResult:
        result = await self._call("GET", "/api/admin/dashboard", "fetching dashboard data", expect="dashData")
        if result.ok:
            self.dash_data = result.payload["dashData"]
        return result

    async def cancel_appointment(self, appointment_id: int) -> ApiResult:
        # The dashboard is derived from appointment state
        mutation = partial(
            self._call, "POST", "/api/admin/cancel-appointment", "cancelling the appointment",
            {"appointmentId": appointment_id}, rejected="Error cancelling appointment", announce=True,
        )
        return await self.coordinator.run(mutation, self.refresh_appointments, self.refresh_dashboard)

    async def toggle_availability(self, doctor_id: int) -> ApiResult:
        mutation = partial(
            self._call, "POST", "/api/admin/change-availability", "changing doctor availability",
            {"docId": doctor_id}, announce=True,
        )
        return await self.coordinator.run(mutation, self.refresh_doctors)


class DoctorDataCache(RoleDataCache):
    role = "doctor"
    login_path = "/api/doctor/login"

    def __init__(self, gateway, credentials, coordinator=None):
        super().__init__(gateway, credentials, coordinator)
        self.appointments: List[dict] = []
        self.dash_data: Dict[str, Any] = {}
        self.profile_data: Any = NOT_LOADED

    async def refresh_appointments(self) -> ApiResult:
        result = await self._call("GET", "/api/doctor/appointments", "fetching appointments", expect="appointments")
        if result.ok:
            self.appointments = result.payload["appointments"]
        return result

    async def refresh_dashboard(self) -> ApiResult:
        result = await self._call("GET", "/api/doctor/dashboard", "fetching dashboard data", expect="dashData")
        if result.ok:
            self.dash_data = result.payload["dashData"]
        return result

    async def refresh_profile(self) -> ApiResult:
        result = await self._call("GET", "/api/doctor/profile", "fetching profile data", expect="profileData")
        if result.ok:
            self.profile_data = result.payload["profileData"]
        return result

    async def complete_appointment(self, appointment_id: int) -> ApiResult:
        mutation = partial(
            self._call, "POST", "/api/doctor/complete-appointment", "completing the appointment",
            {"appointmentId": appointment_id}, rejected="Error completing appointment", announce=True,
        )
        return await self.coordinator.run(mutation, self.refresh_appointments, self.refresh_dashboard)

    async def cancel_appointment(self, appointment_id: int) -> ApiResult:
        mutation = partial(
            self._call, "POST", "/api/doctor/cancel-appointment", "canceling the appointment",
            {"appointmentId": appointment_id}, rejected="Error canceling appointment", announce=True,
        )
        return await self.coordinator.run(mutation, self.refresh_appointments, self.refresh_dashboard)

    def _reset_profile(self) -> None:
        self.profile_data = NOT_LOADED


class PatientDataCache(RoleDataCache):
    role = "patient"
    login_path = "/api/user/login"

    def __init__(self, gateway, credentials, coordinator=None):
        super().__init__(gateway, credentials, coordinator)
        self.doctors: List[dict] = []
        self.appointments: List[dict] = []
        self.user_data: Any = NOT_LOADED

    async def register(self, name: str, email: str, password: str) -> ApiResult:
        """Create a patient account; a success logs the session in."""
        result = await self._call(
            "POST", "/api/user/register", "creating your account",
            {"name": name, "email": email, "password": password},
            expect="token",
        )
        if result.ok:
            self.credentials.set(result.payload["token"])
        return result

    async def refresh_doctors(self) -> ApiResult:
        result = await self._call(
            "GET", "/api/doctor/list", "fetching doctors",
            expect="doctors", rejected="Failed to fetch doctors list",
        )
        if result.ok:
            self.doctors = result.payload["doctors"]
        return result

    async def refresh_appointments(self) -> ApiResult:
        """Fetch the patient's appointments, most recent first."""
        result = await self._call(
            "GET", "/api/user/appointments", "fetching your appointments",
            expect="appointments", rejected="Failed to fetch your appointments",
        )
        if result.ok:
            self.appointments = list(reversed(result.payload["appointments"]))
        return result

    async def refresh_profile(self) -> ApiResult:
        result = await self._call(
            "GET", "/api/user/get-profile", "loading your profile",
            expect="userData", rejected="Failed to load user profile",
        )
        if result.ok:
            self.user_data = result.payload["userData"]
        return result

    def _reset_profile(self) -> None:
        self.user_data = NOT_LOADED
