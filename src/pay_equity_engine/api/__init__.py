"""HTTP API for report review and approval."""
