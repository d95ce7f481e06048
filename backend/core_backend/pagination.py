from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Standard page-number pagination used by every list endpoint.

    Clients may request a different page size with ?page_size=, capped at
    max_page_size to keep list queries bounded.
    """

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
