"""Hospital management application.

This package holds the models, serializers, services, views and route
registrations for patient registration, appointment scheduling,
doctor/ward/bed administration, pharmacy dispensing and billing.
"""
