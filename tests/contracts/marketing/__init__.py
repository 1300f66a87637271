"""
Marketing Service Contract Module

This module contains:
- data_contract.py: model re-exports, test data factory and request builder

The canonical models live in microservices/marketing_service/models.py;
tests in every layer build their data through the factory here.
"""
