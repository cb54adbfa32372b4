#  (C) Copyright
#  Logivations GmbH, Munich 2025
import logging
from typing import List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError

from clients.errors import RemoteError
from report.schemas import Group, Member, Page

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500
REMOTE_ERRORS = (GoogleApiError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


class DirectoryClient:
    def __init__(self, credentials=None, service=None):
        """
        Initialize the Directory client.

        Args:
            credentials: Authorized user credentials from the credential store
            service: Prebuilt Admin Directory service, used instead of building one
        """
        if service is None:
            if credentials is None:
                raise ValueError("Either credentials or service is required")
            service = build("admin", "directory_v1", credentials=credentials)
        self.service = service

    def list_groups(
        self,
        customer_id: str,
        page_size: int = MAX_PAGE_SIZE,
        page_token: Optional[str] = None,
        order_by: str = "email",
    ) -> Page:
        """
        Fetch one page of groups of a customer.

        Args:
            customer_id: Customer ID, "my_customer" for the authenticated account
            page_size: Groups per page, at most 500
            page_token: Continuation token of the previous page
            order_by: Sort key

        Returns:
            The page of groups and its continuation token
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if page_size > MAX_PAGE_SIZE:
            logger.warning(f"page_size {page_size} capped to {MAX_PAGE_SIZE}")
            page_size = MAX_PAGE_SIZE

        params = {"customer": customer_id, "maxResults": page_size, "orderBy": order_by}
        if page_token:
            params["pageToken"] = page_token

        try:
            response = self.service.groups().list(**params).execute()
        except REMOTE_ERRORS as e:
            operation = "retrieve next page in the list" if page_token else "retrieve group lists in domain"
            logger.error(f"Error fetching groups: {e}")
            raise RemoteError(operation, e) from e

        groups = [Group.from_api(g) for g in response.get("groups", [])]
        logger.debug(f"Fetched {len(groups)} groups")
        return Page(groups=groups, next_page_token=response.get("nextPageToken"))

    def list_members(self, group_id: str) -> List[Member]:
        """
        Get all members of a group, following the member pages.

        Args:
            group_id: The group's ID or email address

        Returns:
            Members in the order the API returns them
        """
        members = []
        try:
            request = self.service.members().list(groupKey=group_id)
            while request is not None:
                response = request.execute()
                members.extend(Member.from_api(m) for m in response.get("members", []))
                request = self.service.members().list_next(request, response)
        except REMOTE_ERRORS as e:
            logger.error(f"Error fetching group members of {group_id}: {e}")
            raise RemoteError(f"retrieve members of group {group_id}", e) from e

        logger.debug(f"Found {len(members)} members in group {group_id}")
        return members
