"""
payment_methods.py - Accepted payment methods and their display metadata
"""

PAYMENT_METHOD_OPTIONS = [
    {"value": "Bevo Pay", "label": "Bevo Pay", "avatar": "BP", "color": "orange"},
    {"value": "Cash", "label": "Cash", "avatar": "C", "color": "green"},
    {"value": "Credit/Debit", "label": "Credit/Debit", "avatar": "C/D", "color": "blue"},
    {"value": "Dine In Dollars", "label": "Dine In Dollars", "avatar": "DiD", "color": "grape"},
]

PAYMENT_METHODS = [option["value"] for option in PAYMENT_METHOD_OPTIONS]


def get_payment_method_options():
    """Return a copy of the payment method options for the API"""
    return [dict(option) for option in PAYMENT_METHOD_OPTIONS]


def is_valid_payment_method(value):
    return value in PAYMENT_METHODS
