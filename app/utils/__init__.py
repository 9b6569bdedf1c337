"""
Utilities Package

Helpers shared by the services:
- validation.py: turn raw payloads into typed schemas or a ValidationError
- pagination.py: lenient page/limit parsing
"""
