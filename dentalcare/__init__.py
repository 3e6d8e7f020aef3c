"""DentalCare: local clinic records, appointments and session handling."""

__version__ = "0.1.0"
