"""Payment reconciliation - gateway adapters, settlement and webhooks."""
