"""
Depot Metadata Store.

- backend/: Notification ledger service, API, database, configuration
"""
