"""xp-filters: experience-point scoring filters for courses."""
