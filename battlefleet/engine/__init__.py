"""Generic engine layer: AI scoring and logging pipeline."""
