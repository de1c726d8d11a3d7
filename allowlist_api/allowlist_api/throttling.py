from django.conf import settings
from rest_framework.throttling import SimpleRateThrottle


# per-client rate limit on the public /api/ surface, `None` disables it
class AllowlistRateThrottle(SimpleRateThrottle):
    scope = 'allowlist'

    def get_rate(self):
        return getattr(settings, 'ALLOWLIST_THROTTLE_RATE', None)

    def get_cache_key(self, request, view):
        return self.cache_format % {
            'scope': self.scope,
            'ident': self.get_ident(request)
        }
