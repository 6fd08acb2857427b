"""Remote policy execution: gateway callout and remote endpoints."""
