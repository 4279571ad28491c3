"""
Test package for servicecloud-do.

This package contains:
- test_remote.py: Remote parsing, URL building and equivalence
- test_resolver.py: Ping/redirect resolution
- test_transport.py: HTTP transport and envelope handling
- test_wire.py: Validation of JSON received from remotes
- test_client.py: Invoker, action registry and client tests
- test_errors.py / test_config.py: Errors and configuration
- test_cli.py: Command line tests
- mock_server.py: In-memory transport and mesh for testing
- conftest.py: Pytest configuration and fixtures
"""
