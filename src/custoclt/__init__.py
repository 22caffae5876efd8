"""CustoCLT - Labor-cost accrual and termination settlement for CLT employment."""

__version__ = "0.1.0"
