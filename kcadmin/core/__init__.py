"""Core module of the Keycloak admin client.

Module Structure:
    - keycloak/ : Admin REST API connection, resource services and exceptions
"""
