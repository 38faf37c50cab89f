"""Hostel attendance & checkout-deduction engine.

This package is organized by feature modules (attendance, rules, deductions,
ledger, statistics) with service/repository layers and MySQL/Redis adapters.
"""
