from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response({
            'success': True,
            'message': f'Page {self.page.number} of {paginator.num_pages}, {paginator.count} item(s) in total',
            'pagination': {
                'count': paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'page_size': self.get_page_size(self.request),
                'current_page': self.page.number,
                'total_pages': paginator.num_pages
            },
            'data': data
        }, content_type='application/json')
