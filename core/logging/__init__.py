"""
Logging utilities for the Acts 29 Ministry backend.

This package provides:
- Structured JSON logging
- Sensitive data filtering for PII protection
- Automation lifecycle event logging
"""
