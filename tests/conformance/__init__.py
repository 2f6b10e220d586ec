"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the replay state machine.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - total == available + held, and the withdrawal-dispute gap
2. idempotency.py - unresolvable events leave accounts untouched
3. determinism.py - reproducible and partitionable replay

These tests use hypothesis for property-based testing. Shared strategies live
in strategies.py.
"""
