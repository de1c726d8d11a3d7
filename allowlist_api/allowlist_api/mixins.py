from rest_framework.exceptions import MethodNotAllowed


class SingleMethodMixin:
    """
    Reports the verbs a view accepts in the error message of a rejected
    request, e.g. "Method not allowed. Use POST."
    """

    def http_method_not_allowed(self, request, *args, **kwargs):
        allowed = [method for method in self.allowed_methods
                   if method not in ('HEAD', 'OPTIONS')]
        raise MethodNotAllowed(
            request.method,
            detail='Method not allowed. Use {}.'.format(', '.join(allowed)))
