"""
Test package for motiva_backend.

- test_principal.py / test_access_evaluator.py: roles and envelope-level rules
- test_collection_policies.py: record-level ownership policies
- test_auth.py: session tokens, role resolution and principal building
- test_document_stores.py: in-memory and SQLAlchemy document stores
- test_crud.py: role-scoped reads and writes
- test_gateway.py / test_gateway_api.py: dispatcher and HTTP surface
- test_parq.py, test_services.py, test_cli.py: intake, bookkeeping services and CLI
"""
