"""
Utility modules for RateKeeper.

Cross-cutting concerns:
- Clock: Epoch-millisecond timestamps for records
- Text: UTF-16 length and truncation for review limits
- Storage: CSV/JSON export of user data and statistics
"""
