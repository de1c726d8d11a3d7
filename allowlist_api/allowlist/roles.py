from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

FALLBACK_ROLE_MESSAGE = 'Access granted'

ROLE_PRESETS = {
    'presale': {
        'whitelist': {
            'label': 'Whitelist',
            'message': 'You have whitelist access! You can participate in the whitelist round.',
        },
        'fcfs': {
            'label': 'FCFS',
            'message': 'You have FCFS (First Come First Serve) access! You can participate after the whitelist round.',
        },
        'guaranteed': {
            'label': 'Guaranteed',
            'message': 'You have guaranteed allocation access! You are guaranteed a spot in the sale.',
        },
    },
    'crown': {
        'Crown': {
            'label': 'Crown',
            'message': 'Your wallet is eligible! You have secured 2 NFTs in the FCFS Mint Phase.',
        },
        'Loyal_Crown': {
            'label': 'Loyal Crown',
            'message': 'Your wallet is eligible! You have secured 2 NFTs in the GTD Mint Phase.',
        },
        'Graduated_Crown': {
            'label': 'Graduated Crown',
            'message': 'Your wallet is eligible! You have secured 1 NFT in the Free Mint Phase and 2 NFTs in the GTD Mint Phase.',
        },
    },
}


class UnknownRole(ValueError):
    pass


class RoleCatalog(object):
    """
    Display data of the deployment's role vocabulary.

    Roles are plain string tags mapped to a label and a message. Records may
    carry tags the catalog no longer knows about, those resolve to a generic
    message instead of failing the lookup.
    """

    def __init__(self, roles):
        self._roles = {}
        for role, display in roles.items():
            if isinstance(display, str):
                display = {'message': display}
            self._roles[role] = {
                'label': display.get('label', role),
                'message': display.get('message', FALLBACK_ROLE_MESSAGE),
            }

    @classmethod
    def from_settings(cls):
        roles = getattr(settings, 'ALLOWLIST_ROLES', None)
        if roles is not None:
            return cls(roles)

        preset = getattr(settings, 'ALLOWLIST_ROLE_PRESET', 'presale')
        if preset not in ROLE_PRESETS:
            raise ImproperlyConfigured(
                'Unknown ALLOWLIST_ROLE_PRESET {}. Must be one of: {}'.format(
                    preset, ', '.join(ROLE_PRESETS)))
        return cls(ROLE_PRESETS[preset])

    def __contains__(self, role):
        return role in self._roles

    def roles(self):
        return list(self._roles)

    def label(self, role):
        if role in self._roles:
            return self._roles[role]['label']
        return role

    def role_message(self, role):
        if role in self._roles:
            return self._roles[role]['message']
        return FALLBACK_ROLE_MESSAGE

    def require(self, role):
        if role not in self._roles:
            raise UnknownRole('Invalid role {}. Must be one of: {}'.format(
                role, ', '.join(self._roles)))
        return role
