"""Hearing relay HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives hearing events from the case-management
platform.

Public API
----------
create_app
    Application factory. Registers the probes, and the hearing endpoints
    when a relay service is supplied.
AppDependencies
    Collaborators for ``create_app``.
"""

from hearing_relay.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
