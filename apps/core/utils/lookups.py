from .exceptions import NotFoundError


def get_or_raise(queryset, message, **lookup):
    """Return the single row matching ``lookup`` or raise ``NotFoundError(message)``."""
    if hasattr(queryset, 'objects'):
        queryset = queryset.objects.all()

    instance = queryset.filter(**lookup).first()
    if instance is None:
        raise NotFoundError(message)
    return instance
