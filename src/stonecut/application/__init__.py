"""Application layer - job configuration and orchestration."""
