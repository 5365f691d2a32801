# accounts/context_processors.py
from django.conf import settings

from .permissions import role_of


def role(request):
    """
    Make the current user's role and school settings available in ALL templates.
    """
    return {
        'role': role_of(getattr(request, 'user', None)),
        'school_name': settings.SMIS_SCHOOL_NAME,
        'currency': settings.SMIS_CURRENCY,
    }
