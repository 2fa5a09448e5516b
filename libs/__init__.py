"""Shared helpers used across the ledger service"""
