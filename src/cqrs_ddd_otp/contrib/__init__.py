"""Optional framework integrations for cqrs-ddd-otp."""
