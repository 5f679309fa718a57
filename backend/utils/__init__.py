from .pagination import page_links, total_pages

__all__ = ['page_links', 'total_pages']
