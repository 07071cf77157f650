from typing import Any, Dict

from pinet.api.exceptions import AuthError
from pinet.shared.logging import get_logger
from .http.client import PiHttpClient, extract_tokens

logger = get_logger()

LOGIN_PATH = "/auth/login"
LOGOUT_PATH = "/auth/logout"
REGISTER_PATH = "/auth/register"
VERIFY_PHONE_PATH = "/auth/verify-phone"
RESET_PASSWORD_PATH = "/auth/reset-password"


class PiAuthApi:
    """
    Account entry points of the Pi Network API.

    Thin wrapper over a shared :class:`PiHttpClient`: login and registration
    store the returned tokens on the client, logout always leaves it
    anonymous.
    """

    def __init__(self, client: PiHttpClient):
        self.client = client

    async def login(self, identifier: str, secret: str) -> Dict[str, Any]:
        """
        Log in with username (or email) and password.

        Returns:
            Dict[str, Any]: Response body with user data and tokens

        Raises:
            AuthError: Invalid credentials or a response without a token
        """
        data = await self.client.request(
            "POST",
            LOGIN_PATH,
            json={"username": identifier, "password": secret},
            authenticate=False)

        access_token, refresh_token = extract_tokens(data)
        if not access_token:
            raise AuthError("Login response did not include an access token", body=data)

        self.client.set_credential(access_token, refresh_token)
        logger.info("Logged in as %s", identifier)
        return data

    async def register(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create an account; stores the credential when the response carries one."""
        data = await self.client.request("POST", REGISTER_PATH, json=user_data, authenticate=False)

        access_token, refresh_token = extract_tokens(data)
        if access_token:
            self.client.set_credential(access_token, refresh_token)
        return data

    async def verify_phone(self, phone_number: str, verification_code: str) -> Any:
        return await self.client.request(
            "POST",
            VERIFY_PHONE_PATH,
            json={"phoneNumber": phone_number, "verificationCode": verification_code})

    async def reset_password(self, email: str) -> Any:
        return await self.client.request("POST", RESET_PASSWORD_PATH, json={"email": email}, authenticate=False)

    async def logout(self) -> Any:
        """
        Log out remotely, then clear the local credential.

        The credential is cleared even when the remote call fails; the
        failure is still raised to the caller.
        """
        try:
            return await self.client.request("POST", LOGOUT_PATH)
        finally:
            self.client.clear_credential()
