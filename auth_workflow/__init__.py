"""
Auth workflow service: registration, login, email OTP verification and
password reset.
"""

__version__ = "1.0.0"
