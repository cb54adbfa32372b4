#  (C) Copyright
#  Logivations GmbH, Munich 2025
import csv
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from clients.directory_client import MAX_PAGE_SIZE, DirectoryClient
from clients.errors import PaginationLimitError
from report.schemas import CsvHeaders, Group, Member, Notices, Page, ReportSummary

logger = logging.getLogger(__name__)


def quoted_list(values: Sequence[str]) -> str:
    """Join values with commas inside one pair of double quotes."""
    return '"' + ",".join(values) + '"'


def render_row(group: Group, members: List[Member]) -> str:
    """Render a group as a CSV line without escaping its fields."""
    return ",".join(
        [
            group.id,
            group.name,
            group.email,
            str(group.direct_members_count),
            quoted_list(group.aliases),
            quoted_list([m.email for m in members]),
        ]
    )


class ReportGenerator:
    """Writes every group of a customer, with aliases and members, as CSV."""

    def __init__(
        self,
        directory_client: DirectoryClient,
        out: TextIO = None,
        page_size: int = MAX_PAGE_SIZE,
        order_by: str = "email",
        header: CsvHeaders = CsvHeaders.EN,
        strict_csv: bool = False,
        max_pages: Optional[int] = None,
    ):
        self.directory_client = directory_client
        self.out = out or sys.stdout
        self.page_size = page_size
        self.order_by = order_by
        self.header = header
        self.strict_csv = strict_csv
        self.max_pages = max_pages
        self._writer = csv.writer(self.out, lineterminator="\n") if strict_csv else None

    def run(self, customer_id: str) -> ReportSummary:
        """Emit the header and one row per group, page after page."""
        summary = ReportSummary()
        self._write_fields(self.header.value)

        page = self._fetch_page(customer_id, None, summary)
        if not page.groups:
            summary.empty_pages += 1
            self._write_line(Notices.NO_GROUPS.value)
        else:
            self._emit_rows(page, summary)

        while page.has_next:
            page = self._fetch_page(customer_id, page.next_page_token, summary)
            if not page.groups:
                summary.empty_pages += 1
                logger.warning(f"Empty page returned for customer {customer_id}")
                self._write_line(Notices.EMPTY_PAGE.value)
            else:
                self._emit_rows(page, summary)

        logger.info(
            f"Exported {summary.groups} groups from {summary.pages} pages "
            f"({summary.empty_pages} empty)"
        )
        return summary

    def _fetch_page(self, customer_id: str, page_token: Optional[str], summary: ReportSummary) -> Page:
        if self.max_pages is not None and summary.pages >= self.max_pages:
            raise PaginationLimitError(self.max_pages)
        page = self.directory_client.list_groups(
            customer_id, self.page_size, page_token, self.order_by
        )
        summary.pages += 1
        return page

    def _emit_rows(self, page: Page, summary: ReportSummary):
        for group in page.groups:
            members = self.directory_client.list_members(group.id)
            if self.strict_csv:
                self._write_fields(
                    [
                        group.id,
                        group.name,
                        group.email,
                        str(group.direct_members_count),
                        ",".join(group.aliases),
                        ",".join(m.email for m in members),
                    ]
                )
            else:
                self._write_line(render_row(group, members))
            summary.groups += 1

    def _write_fields(self, fields: Sequence[str]):
        if self._writer is not None:
            self._writer.writerow(fields)
        else:
            self._write_line(",".join(fields))

    def _write_line(self, line: str):
        self.out.write(line + "\n")
        self.out.flush()
