"""
Pagination Classes for API responses
"""

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from collections import OrderedDict
from typing import Any, Dict


class StandardPagination(PageNumberPagination):
    """
    Page number pagination with configurable page size.
    Returns total count, page info and navigation links.

    Views may set `extra_fields` before building the response to attach
    page-independent data (totals, aggregates) to the envelope.
    """

    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100
    page_query_param = 'page'

    def __init__(self):
        self.extra_fields: Dict[str, Any] = {}

    def get_paginated_response(self, data: Any) -> Response:
        body = OrderedDict([
            ('success', True),
            ('count', self.page.paginator.count),
            ('total_pages', self.page.paginator.num_pages),
            ('current_page', self.page.number),
            ('page_size', self.get_page_size(self.request)),
            ('next', self.get_next_link()),
            ('previous', self.get_previous_link()),
            ('results', data),
        ])
        body.update(self.extra_fields)
        return Response(body)
