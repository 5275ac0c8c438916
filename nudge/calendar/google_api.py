# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       GOOGLE CALENDAR API MODULE                           ║
# ║    Builds the Calendar API service from service account credentials and   ║
# ║    exposes the two calls the weekly run needs.                             ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
google_api.py: Google Calendar API setup and a thin client wrapper.
"""
import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build

from utils.environ import (
    CALENDAR_OWNER_EMAIL,
    GOOGLE_APPLICATION_CREDENTIALS,
    GOOGLE_SERVICE_ACCOUNT_KEY,
)
from utils.error_handling import ConfigurationError
from utils.logging import logger
from utils.redaction import sanitize_calendar_id
from .retry import retry_api_call

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CONSTANTS & CREDENTIALS                                                   ║
# ╚════════════════════════════════════════════════════════════════════════════╝

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
# Calendar API page size cap for events().list
MAX_RESULTS_PER_PAGE = 2500

# --- load_credentials ---
# Loads service account credentials from inline JSON (preferred) or a key file.
# When `subject` is given, the credentials impersonate that user through
# domain-wide delegation.
# Raises: ConfigurationError when no usable credentials are available.
def load_credentials(
    service_account_key: Optional[str] = GOOGLE_SERVICE_ACCOUNT_KEY,
    credentials_file: Optional[str] = GOOGLE_APPLICATION_CREDENTIALS,
    subject: Optional[str] = CALENDAR_OWNER_EMAIL,
):
    if service_account_key:
        try:
            info = json.loads(service_account_key)
        except ValueError as e:
            raise ConfigurationError(f"GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}") from e
        try:
            credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        except (ValueError, KeyError) as e:
            raise ConfigurationError(f"Invalid service account key: {e}") from e
    elif credentials_file and os.path.exists(credentials_file):
        try:
            credentials = service_account.Credentials.from_service_account_file(credentials_file, scopes=SCOPES)
        except (ValueError, KeyError) as e:
            raise ConfigurationError(f"Invalid service account file {credentials_file}: {e}") from e
    else:
        raise ConfigurationError(
            "Service account credentials are required: set GOOGLE_SERVICE_ACCOUNT_KEY "
            "or GOOGLE_APPLICATION_CREDENTIALS"
        )

    if subject:
        logger.info("Using domain-wide delegation for calendar owner")
        credentials = credentials.with_subject(subject)
    return credentials

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CALENDAR CLIENT                                                           ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class GoogleCalendarClient:
    """Calendar capability: list events in a range, read calendar metadata."""

    def __init__(self, service, credentials=None, max_retries: int = 3, sleep=None):
        self.service = service
        self.credentials = credentials
        self.max_retries = max_retries
        self._sleep = sleep

    @classmethod
    def from_environment(cls) -> "GoogleCalendarClient":
        credentials = load_credentials()
        service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        logger.info("Google Calendar service initialized.")
        return cls(service, credentials=credentials)

    def _new_http(self):
        # httplib2.Http is not thread-safe; each request gets its own transport
        if self.credentials is None:
            return None
        return google_auth_httplib2.AuthorizedHttp(self.credentials, http=httplib2.Http())

    def _execute(self, request):
        http = self._new_http()
        call = request.execute if http is None else (lambda: request.execute(http=http))
        if self._sleep is not None:
            return retry_api_call(call, max_retries=self.max_retries, sleep=self._sleep)
        return retry_api_call(call, max_retries=self.max_retries)

    def list_events(self, calendar_id: str, time_min: datetime, time_max: datetime,
                    timezone: Optional[str] = None) -> List[Dict[str, Any]]:
        """Raw event items overlapping [time_min, time_max], recurring events expanded."""
        items: List[Dict[str, Any]] = []
        page_token = None
        while True:
            params = {
                "calendarId": calendar_id,
                "timeMin": time_min.isoformat(),
                "timeMax": time_max.isoformat(),
                "singleEvents": True,
                "orderBy": "startTime",
                "maxResults": MAX_RESULTS_PER_PAGE,
            }
            if timezone:
                params["timeZone"] = timezone
            if page_token:
                params["pageToken"] = page_token
            response = self._execute(self.service.events().list(**params))
            items.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        logger.debug(f"Fetched {len(items)} raw events from {sanitize_calendar_id(calendar_id)}")
        return items

    def get_calendar_metadata(self, calendar_id: str) -> Dict[str, Any]:
        return self._execute(self.service.calendars().get(calendarId=calendar_id))
