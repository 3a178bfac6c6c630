"""Service layer.

Subpackages
-----------
- ``_shared``: base service, domain errors and hexagonal ports.
- ``auth``: session lifecycle (:class:`AuthService`), gates and DTOs.
- ``credentials``: email/password verification.
- ``users``: administrative operations over principals.

Nothing is re-exported here: repositories import the domain errors from
``_shared`` and must not pull the services in with them.
"""
