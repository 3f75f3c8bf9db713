"""HTTP API for payroll admin."""
