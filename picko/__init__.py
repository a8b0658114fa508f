"""Weather-driven toddler outfit recommendations."""
