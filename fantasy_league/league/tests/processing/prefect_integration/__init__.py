"""
Prefect integration tests.

These run flows under prefect.testing.utilities.prefect_test_harness with a
real (test) database, so task orchestration, logging context and state
handling are exercised for real.
"""
