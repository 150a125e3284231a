"""Core building blocks: transport, models, errors and the upload pipeline."""
