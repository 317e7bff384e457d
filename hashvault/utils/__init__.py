from .api_response import success_response, error_response

__all__ = ['success_response', 'error_response']
