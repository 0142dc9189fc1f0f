"""Fleet expense ledger back-office core."""
