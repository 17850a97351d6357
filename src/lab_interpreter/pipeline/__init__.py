"""Extract, organize and evaluate stages for lab test records."""
