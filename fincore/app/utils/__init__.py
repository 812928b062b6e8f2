"""
Utility functions for FinCore.

This package contains:
- decimal_utils: Decimal coercion, quantization and guarded percentages
- financial_math: Annuity formulas, periodicity and calendar helpers
- validation_utils: Reusable Pydantic validator helpers
"""
