"""
core/context_processors.py
──────────────────────────
Global template context injected into every request.

Registered in settings.py → TEMPLATES[0]['OPTIONS']['context_processors'].
"""

from django.conf import settings


def school(request):
    """
        school_name – shown in the header and on receipts
        currency    – suffix used for every amount
    """
    return {
        'school_name': settings.SCHOOL_NAME,
        'currency':    settings.CURRENCY,
    }
