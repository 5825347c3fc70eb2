"""Clinic application for the hospital management backend.

This package contains models, serializers, services, views and route
registrations implementing the REST API consumed by the client
application.
"""
