"""PostgreSQL connection management and store error hierarchy."""
