import logging

from ga4audit.domain.ga4_audit import UserInfo
from ga4audit.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


class GoogleAuthService:
    """Validate a caller-supplied OAuth access token against Google's userinfo endpoint."""

    def __init__(self, api_service, userinfo_url: str = USERINFO_URL):
        self.api_service = api_service
        self.userinfo_url = userinfo_url

    def validate_token(self, access_token: str) -> UserInfo:
        if not access_token or not str(access_token).strip():
            raise InvalidInputError("Access token is required")
        data = self.api_service.get_json(self.userinfo_url, access_token.strip(), service="Google OAuth")
        user = UserInfo.model_validate(data)
        logger.info("Access token validated")
        return user
