"""
Crane Pricing Package

Pricing engine for a crane-rental CRM.
Computes trip costs and the H2-H11 rent tariff, and stores one record per calculation.
"""

__version__ = "1.0.0"
