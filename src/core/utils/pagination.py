import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class CustomPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 200

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.get_page_size(self.request) or self.page_size
        return Response(
            {
                "results": data,
                "pagination": {
                    "page": self.page.number,
                    "limit": limit,
                    "total": total,
                    "pages": math.ceil(total / limit) if limit else 0,
                },
            }
        )
