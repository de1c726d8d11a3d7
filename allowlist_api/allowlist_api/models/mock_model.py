# Attribute bag handed to serializers for computed, non-persisted payloads.
class MockModel(object):
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)
